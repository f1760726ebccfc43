"""Storage primitives for applying organization plans."""

from .filesystem import FileSystem

__all__ = ["FileSystem"]
