"""Core services: configuration, theming, and clean execution."""
