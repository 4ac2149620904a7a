"""Lazy discovery of resources in directories, zip archives and search paths."""

import importlib.metadata
import logging

from resource_loader.config import LoaderSettings, ResolvedSettings, resolve_settings
from resource_loader.exceptions import (
    ConfigFileError,
    EnumerationStateError,
    NoSuchResourceError,
    PatternError,
    ResourceIOError,
    ResourceLoaderError,
    ValidationError,
)
from resource_loader.filters import (
    ALWAYS,
    NEVER,
    AllFilter,
    AnyFilter,
    AntFilter,
    Filter,
    FrozenFilter,
    MixFilter,
    RegexFilter,
    all_of,
    and_,
    any_of,
    or_,
)
from resource_loader.loaders import (
    AntLoader,
    ArchiveLoader,
    EnumeratorState,
    FileLoader,
    Loader,
    PackageLoader,
    RegexLoader,
    ResourceEnumerator,
    SearchPath,
    SearchPathLoader,
)
from resource_loader.resource import Resource

# Version handling
try:
    __version__ = importlib.metadata.version("resource-loader")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [  # noqa: RUF022
    # Values
    "Resource",
    # Loaders
    "Loader",
    "ResourceEnumerator",
    "EnumeratorState",
    "FileLoader",
    "ArchiveLoader",
    "SearchPath",
    "SearchPathLoader",
    "AntLoader",
    "RegexLoader",
    "PackageLoader",
    # Filters
    "Filter",
    "ALWAYS",
    "NEVER",
    "RegexFilter",
    "AntFilter",
    "MixFilter",
    "AllFilter",
    "AnyFilter",
    "FrozenFilter",
    "all_of",
    "and_",
    "any_of",
    "or_",
    # Configuration
    "LoaderSettings",
    "ResolvedSettings",
    "resolve_settings",
    # Exceptions
    "ResourceLoaderError",
    "ValidationError",
    "ResourceIOError",
    "EnumerationStateError",
    "PatternError",
    "NoSuchResourceError",
    "ConfigFileError",
]
