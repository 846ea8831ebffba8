"""Bundled data files for crabclean."""
