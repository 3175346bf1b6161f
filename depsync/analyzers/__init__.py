"""Source analysis: import extraction and reference resolution."""

from .imports import ImportExtractor, SourceParseError, extract_package_imports
from .references import resolve_reference, resolve_references

__all__ = [
    "ImportExtractor",
    "SourceParseError",
    "extract_package_imports",
    "resolve_reference",
    "resolve_references",
]
