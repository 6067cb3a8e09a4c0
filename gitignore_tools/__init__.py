"""Build .gitignore files from named templates."""

__version__ = "2.0.0"
