"""git-nexus: multi-repository scanner and fixer."""

__version__ = "0.4.0"
