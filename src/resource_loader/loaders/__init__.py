"""Loaders for directories, archives, search paths and pattern expressions."""

from .archive import ArchiveEnumerator, ArchiveLoader
from .base import EmptyEnumerator, EnumeratorState, Loader, ResourceEnumerator
from .file import FileEnumerator, FileLoader
from .pattern import AntLoader, DelegateLoader, PackageLoader, PatternLoader, RegexLoader
from .search_path import (
    ArchiveRoot,
    DirectoryRoot,
    LocatedRoot,
    RootKind,
    SearchPath,
    SearchPathEnumerator,
    SearchPathLoader,
    UnsupportedRoot,
    classify_root,
)

__all__ = [  # noqa: RUF022
    # Contract
    "Loader",
    "ResourceEnumerator",
    "EnumeratorState",
    "EmptyEnumerator",
    # Single-source walkers
    "FileLoader",
    "FileEnumerator",
    "ArchiveLoader",
    "ArchiveEnumerator",
    # Search path
    "SearchPath",
    "SearchPathLoader",
    "SearchPathEnumerator",
    "LocatedRoot",
    "RootKind",
    "DirectoryRoot",
    "ArchiveRoot",
    "UnsupportedRoot",
    "classify_root",
    # Expression loaders
    "DelegateLoader",
    "PatternLoader",
    "AntLoader",
    "RegexLoader",
    "PackageLoader",
]
