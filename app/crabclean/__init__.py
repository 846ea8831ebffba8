"""crabclean - clean every Cargo project below a directory.

Discovers Cargo projects recursively, skips workspace members whose
artifacts are cleaned through their workspace root, and runs
``cargo clean`` for the remaining projects concurrently.
"""

__version__ = "0.3.0"
