"""Errors raised while converting documents."""

from pathlib import Path
from typing import Any, Optional, Union


def _format_label(format: Any) -> Optional[str]:
    if format is None:
        return None
    return str(getattr(format, "value", format))


class ConversionError(Exception):
    """
    Base class for every failure of a conversion.

    Attributes:
        stage: Step that failed (resolve, parse, query, emit or io)
        format: Format involved, if any
        cause: Human-readable reason
    """

    stage = "convert"

    def __init__(self, cause: str, format: Any = None):
        self.cause = cause
        self.format = _format_label(format)
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.format:
            return f"{self.stage} error ({self.format}): {self.cause}"
        return f"{self.stage} error: {self.cause}"


class UnsupportedFormat(ConversionError):
    """A file extension or format flag names no known adapter."""

    stage = "resolve"

    def __init__(self, name: Union[str, Path], cause: Optional[str] = None):
        self.name = str(name)
        super().__init__(cause or f"unsupported format {self.name!r}")


class ParseError(ConversionError):
    """Input does not conform to the grammar of its format."""

    stage = "parse"

    def __init__(
        self,
        cause: str,
        format: Any = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.line = line
        self.column = column
        super().__init__(cause, format)

    def __str__(self) -> str:
        text = super().__str__()
        if self.line is None:
            return text

        location = f"line {self.line}"
        if self.column is not None:
            location += f", column {self.column}"

        prefix, _, cause = text.partition(": ")
        return f"{prefix} at {location}: {cause}"


class UnsupportedFeature(ConversionError):
    """Input uses a construct the value model cannot hold."""

    stage = "parse"

    def __init__(self, feature: str, format: Any = None):
        self.feature = feature
        super().__init__(f"{feature} are not supported", format)


class UnrepresentableError(ConversionError):
    """A value tree cannot be written in the target format."""

    stage = "emit"

    def __init__(self, type_name: str, format: Any = None, reason: str = ""):
        self.type_name = type_name
        cause = f"cannot represent {type_name}"
        if reason:
            cause += f": {reason}"
        super().__init__(cause, format)


class QueryError(ConversionError):
    """A JMESPath query could not be applied."""

    stage = "query"

    def __init__(self, expression: str, cause: str):
        self.expression = expression
        super().__init__(f"{expression!r}: {cause}")


class FileAccessError(ConversionError):
    """Reading the input or writing the output failed."""

    stage = "io"

    def __init__(self, path: Union[str, Path], cause: str):
        self.path = Path(path)
        super().__init__(f"{self.path}: {cause}")
