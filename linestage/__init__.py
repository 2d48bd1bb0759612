"""Stage individual lines of a working-tree file through git."""

__version__ = "0.1.0"
