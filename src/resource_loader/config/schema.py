"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces
configuration values from the environment, the project file and
programmatic overrides into the correct types with proper defaults.
"""

import codecs
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

ENV_PREFIX = "RESOURCE_LOADER_"

DEFAULT_ARCHIVE_SUFFIXES = (".zip", ".jar", ".whl", ".egg", ".pyz")


class LoaderSettings(BaseSettings):
    """Pydantic settings schema for resource loading.

    Integrates with environment variables using the RESOURCE_LOADER_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=None,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    charset: str = Field(
        default="utf-8",
        description="Charset used to percent-encode names into locations",
        min_length=1,
    )

    marker: str = Field(
        default="META-INF/",
        description="Entry whose presence makes an archive a search-path root",
        min_length=1,
    )

    archive_suffixes: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_ARCHIVE_SUFFIXES,
        description="File suffixes of search-path entries treated as zip archives",
    )

    # --- Validation Rules ---

    @field_validator("charset")
    @classmethod
    def known_charset(cls, v: str) -> str:
        """Reject charsets Python has no codec for."""
        try:
            return codecs.lookup(v).name
        except LookupError:
            raise ValueError(f"Unknown charset: {v}") from None

    @field_validator("archive_suffixes", mode="before")
    @classmethod
    def parse_suffixes(cls, v: Any) -> tuple[str, ...]:
        """Accept a comma separated string or a sequence; normalize to '.ext'."""
        if isinstance(v, str):
            v = v.split(",")
        suffixes = []
        for item in v:
            suffix = str(item).strip().lower()
            if not suffix:
                continue
            suffixes.append(suffix if suffix.startswith(".") else "." + suffix)
        return tuple(suffixes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "charset": self.charset,
            "marker": self.marker,
            "archive_suffixes": self.archive_suffixes,
        }
