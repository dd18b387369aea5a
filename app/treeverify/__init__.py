"""treeverify - verify directory trees against SHA-1 manifests."""

__version__ = "1.2.0"
