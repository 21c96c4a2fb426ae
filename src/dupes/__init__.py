"""Find probable duplicate files by size and content digest."""

__version__ = "0.1.0"
