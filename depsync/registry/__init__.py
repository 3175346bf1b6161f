"""Dependency version resolution."""

from .cache import DependencyVersionCache
from .client import RegistryClient, RegistryRequest, VersionLookupError
from .lookup import DependencyLookup, WorkspaceVersions

__all__ = [
    "DependencyLookup",
    "DependencyVersionCache",
    "RegistryClient",
    "RegistryRequest",
    "VersionLookupError",
    "WorkspaceVersions",
]
