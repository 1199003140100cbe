"""Symbol export/strip classification for compiled binaries."""

__version__ = "0.3.0"
