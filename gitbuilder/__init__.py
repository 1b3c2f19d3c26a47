"""Building blocks for a git push-to-deploy builder: pushes, build types, storage keys, cleanup."""

__version__ = "0.1.0"