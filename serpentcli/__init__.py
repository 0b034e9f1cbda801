"""Building blocks for command-line applications: flags, a command tree, streams and help templates."""

__version__ = "0.1.0"

__all__ = ["flags", "streams", "templates", "tree"]