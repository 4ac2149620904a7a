"""The value object produced by every loader."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING
import zipfile

from . import uris
from .exceptions import ResourceIOError, ValidationError

if TYPE_CHECKING:
    from typing import BinaryIO

log = logging.getLogger(__name__)


def _require(*, condition: bool, message: str, field_name: str | None = None) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise ValidationError(f"{field_name}: {message}")
        raise ValidationError(message)


@dataclasses.dataclass(frozen=True, slots=True)
class Resource:
    """A named, addressable, readable artifact found by a loader.

    Two resources are equal when their locations are equal; the name is the
    store-relative path used for display and filtering. Content is only read
    when `open_stream` is called.
    """

    name: str = dataclasses.field(compare=False)
    location: str
    charset: str = dataclasses.field(default=uris.DEFAULT_CHARSET, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate name and location."""
        _require(
            condition=isinstance(self.name, str),
            message="must be a str",
            field_name="name",
        )
        _require(
            condition=not self.name.startswith("/"),
            message=f"must be store-relative, got {self.name!r}",
            field_name="name",
        )
        _require(
            condition=isinstance(self.location, str) and self.location.strip() != "",
            message="must be a non-empty str",
            field_name="location",
        )

    def open_stream(self) -> BinaryIO:
        """Open the resource content for reading.

        The caller owns the returned stream and must close it.

        Raises:
            ResourceIOError: If the backing file or archive entry cannot be opened.
        """
        scheme = uris.scheme_of(self.location)
        try:
            if scheme == uris.FILE_SCHEME:
                return uris.location_to_path(self.location, self.charset).open("rb")
            if scheme == uris.ARCHIVE_SCHEME:
                return self._open_archive_entry()
        except ResourceIOError:
            raise
        except (OSError, ValueError, KeyError, zipfile.BadZipFile) as e:
            raise ResourceIOError(f"Cannot open {self.location}: {e}") from e
        raise ResourceIOError(f"Unsupported location scheme: {self.location}")

    def _open_archive_entry(self) -> BinaryIO:
        archive, name = uris.split_archive_location(self.location, self.charset)
        log.debug("Opening %s inside %s", name, archive)
        zf = zipfile.ZipFile(archive)
        try:
            # The entry stream keeps the archive file alive until it is closed.
            return zf.open(name)
        finally:
            zf.close()

    def read_bytes(self) -> bytes:
        """Read the whole resource content."""
        with self.open_stream() as stream:
            return stream.read()

    def __str__(self) -> str:
        """Resources print as their location."""
        return self.location
