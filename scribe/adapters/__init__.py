"""Parser/emitter pairs for each supported format."""

from typing import Callable, Dict, NamedTuple, Union

from ..errors import UnsupportedFormat
from ..formats import Format
from ..value import Value
from . import json_adapter, toml_adapter, yaml_adapter


class Adapter(NamedTuple):
    """A format's parser and emitter."""

    parse: Callable[[str], Value]
    emit: Callable[..., str]


ADAPTERS: Dict[Format, Adapter] = {
    Format.JSON: Adapter(json_adapter.parse, json_adapter.emit),
    Format.YAML: Adapter(yaml_adapter.parse, yaml_adapter.emit),
    Format.TOML: Adapter(toml_adapter.parse, toml_adapter.emit),
}


def get_adapter(format: Union[str, Format]) -> Adapter:
    """
    Look up the adapter for a format name or Format.

    Raises:
        UnsupportedFormat: If no adapter handles the format
    """
    resolved = Format.from_name(format)
    if resolved not in ADAPTERS:
        raise UnsupportedFormat(format)
    return ADAPTERS[resolved]


__all__ = ["ADAPTERS", "Adapter", "get_adapter"]
