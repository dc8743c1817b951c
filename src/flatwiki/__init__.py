"""FlatWiki: a minimal flat-file personal wiki."""

__version__ = "0.1.0"
