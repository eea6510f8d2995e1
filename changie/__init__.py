"""Keep a Changelog management and Semantic Versioning releases with git tags."""

__version__ = "0.1.0"
__all__ = ["__version__"]