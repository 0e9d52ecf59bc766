"""Mirror a source directory tree onto a destination directory tree."""

__version__ = "0.1.0"
