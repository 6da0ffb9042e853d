"""Package manager for VCS-hosted modules."""

__version__ = "0.1.0"
