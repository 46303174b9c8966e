"""Command-line runner that compiles, verifies and tracks Rust practice exercises."""

__version__ = "5.5.1"
__all__ = ["__version__"]