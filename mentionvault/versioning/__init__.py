"""Git versioning of vault rewrites."""

from .manager import VersionManager

__all__ = ["VersionManager"]
