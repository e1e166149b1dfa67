"""Supported formats and how they are resolved from paths and flags."""

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .errors import UnsupportedFormat


class Format(str, Enum):
    """Supported document formats."""

    JSON = "json"
    YAML = "yaml"
    TOML = "toml"

    @property
    def extension(self) -> str:
        """Extension used when an output path has to be derived."""
        return FORMAT_EXTENSIONS[self]

    @classmethod
    def from_name(cls, name: Union[str, "Format"]) -> "Format":
        """
        Look up a format by name (``json``, ``yaml``, ``yml``, ``toml``).

        Raises:
            UnsupportedFormat: If the name is not recognized
        """
        if isinstance(name, Format):
            return name

        key = str(name).strip().lower().lstrip(".")
        if key in NAME_ALIASES:
            return NAME_ALIASES[key]
        raise UnsupportedFormat(name)


NAME_ALIASES = {
    "json": Format.JSON,
    "yaml": Format.YAML,
    "yml": Format.YAML,
    "toml": Format.TOML,
}

SUFFIXES = {
    ".json": Format.JSON,
    ".yaml": Format.YAML,
    ".yml": Format.YAML,
    ".toml": Format.TOML,
}

FORMAT_EXTENSIONS = {
    Format.JSON: "json",
    Format.YAML: "yml",
    Format.TOML: "toml",
}


def format_from_path(path: Union[str, Path]) -> Format:
    """
    Infer a format from a file extension, ignoring case.

    Raises:
        UnsupportedFormat: If the extension is missing or unknown
    """
    suffix = Path(path).suffix.lower()
    if suffix in SUFFIXES:
        return SUFFIXES[suffix]

    if suffix:
        raise UnsupportedFormat(path, f"cannot infer a format from extension {suffix!r} of {path}")
    raise UnsupportedFormat(path, f"cannot infer a format for {path} (no extension)")


def resolve_format(
    path: Optional[Union[str, Path]],
    override: Optional[Union[str, Format]] = None,
) -> Format:
    """
    Pick the format for one side of a conversion.

    An explicit override wins over the extension of ``path``.
    """
    if override is not None:
        return Format.from_name(override)
    if path is None:
        raise UnsupportedFormat("", "no path and no explicit format given")
    return format_from_path(path)


def derive_output_path(input_path: Union[str, Path], format: Format) -> Path:
    """Swap the input path's extension for the output format's extension."""
    return Path(input_path).with_suffix(f".{format.extension}")
