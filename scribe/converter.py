"""Core conversion logic."""

import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

import jmespath
from jmespath.exceptions import JMESPathError

from .adapters import get_adapter
from .errors import ConversionError, FileAccessError, ParseError, QueryError
from .formats import Format, derive_output_path, resolve_format
from .shared.logger import get_logger
from .value import Value

logger = get_logger(__name__)

FormatLike = Union[str, Format]


class DataConverter:
    """
    Convert documents between JSON, YAML, and TOML.

    Input is parsed into a :class:`~scribe.value.Value` tree which the output
    format's emitter then writes. Nothing reaches the destination until the
    output has been produced in full. Comments in the source document are
    not part of the tree and never reach the output.
    """

    def __init__(self, indent: int = 2, minify: bool = False):
        """
        Initialize data converter.

        Args:
            indent: Indentation for pretty output
            minify: Produce compact output where the format allows it (JSON)
        """
        self.indent = indent
        self.minify = minify
        logger.debug(f"Initialized DataConverter (indent={indent}, minify={minify})")

    def parse(self, data: bytes, format: FormatLike) -> Value:
        """
        Parse raw bytes.

        Args:
            data: Encoded document (UTF-8, optional BOM)
            format: Input format

        Returns:
            Parsed value tree

        Raises:
            UnsupportedFormat: If the format is unknown
            ParseError: If the document is malformed
            UnsupportedFeature: If the document uses constructs with no
                value model counterpart
        """
        fmt = Format.from_name(format)
        adapter = get_adapter(fmt)

        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"input is not valid UTF-8 ({e.reason} at byte {e.start})", fmt) from e

        value = adapter.parse(text)
        logger.debug(f"Parsed {fmt.value} input into a {value.type_name}")
        return value

    def emit(self, value: Value, format: FormatLike) -> bytes:
        """
        Write a value tree.

        Args:
            value: Tree to write
            format: Output format

        Returns:
            Encoded document

        Raises:
            UnsupportedFormat: If the format is unknown
            UnrepresentableError: If the tree does not fit the format
        """
        fmt = Format.from_name(format)
        adapter = get_adapter(fmt)

        if self.minify and fmt is not Format.JSON:
            logger.warning(f"Minified output is only available for JSON, ignoring for {fmt.value}")

        text = adapter.emit(value, indent=self.indent, compact=self.minify)
        return text.encode("utf-8")

    def query(self, value: Value, expression: str) -> Value:
        """
        Query a value tree using JMESPath.

        Args:
            value: Tree to query
            expression: JMESPath expression

        Returns:
            Query result as a new tree

        Raises:
            QueryError: If the expression is invalid
        """
        try:
            result = jmespath.search(expression, value.to_python())
        except JMESPathError as e:
            raise QueryError(expression, str(e)) from e

        return Value.from_python(result)

    def convert(
        self,
        data: bytes,
        from_format: FormatLike,
        to_format: FormatLike,
        query: Optional[str] = None,
    ) -> bytes:
        """
        Convert a document held in memory.

        Args:
            data: Input document
            from_format: Input format
            to_format: Output format
            query: Optional JMESPath expression applied before emitting

        Returns:
            Output document
        """
        value = self.parse(data, from_format)

        if query:
            logger.info(f"Applying query: {query}")
            value = self.query(value, query)

        return self.emit(value, to_format)

    def convert_file(
        self,
        input_path: Path,
        output_path: Optional[Path] = None,
        from_format: Optional[FormatLike] = None,
        to_format: Optional[FormatLike] = None,
        query: Optional[str] = None,
    ) -> Path:
        """
        Convert file from one format to another.

        Formats come from the explicit arguments or, failing that, from the
        file extensions; both are resolved before any file is touched.

        Args:
            input_path: Input file path
            output_path: Output file path (derived from the input path and
                ``to_format`` if None)
            from_format: Source format (inferred from extension if None)
            to_format: Target format (inferred from extension if None)
            query: Optional JMESPath expression

        Returns:
            Path that was written
        """
        input_path = Path(input_path)
        in_fmt = resolve_format(input_path, from_format)

        if output_path is None:
            if to_format is None:
                raise ConversionError("an output path or an output format is required")
            out_fmt = Format.from_name(to_format)
            output_path = derive_output_path(input_path, out_fmt)
            if output_path == input_path:
                raise ConversionError(f"derived output path {output_path} would overwrite the input")
        else:
            output_path = Path(output_path)
            out_fmt = resolve_format(output_path, to_format)

        logger.info(f"Loading {in_fmt.value} from {input_path}")
        data = read_input(input_path)

        try:
            output_data = self.convert(data, in_fmt, out_fmt, query=query)
        except ConversionError as e:
            logger.error(f"Failed to convert {input_path}: {e}")
            raise

        write_output(output_path, output_data)
        logger.info(f"Converted {input_path} to {output_path}")
        return output_path


def convert(
    input_bytes: bytes,
    input_format: FormatLike,
    sink: BinaryIO,
    output_format: FormatLike,
    **options: Any,
) -> None:
    """
    Convert ``input_bytes`` and write the result to ``sink``.

    The sink receives nothing unless the whole conversion succeeds.

    Args:
        input_bytes: Input document
        input_format: Input format name or Format
        sink: Binary stream receiving the output
        output_format: Output format name or Format
        **options: ``indent``, ``minify`` and ``query``
    """
    query = options.pop("query", None)
    output_data = DataConverter(**options).convert(input_bytes, input_format, output_format, query=query)
    sink.write(output_data)


def read_input(path: Path) -> bytes:
    """Read a whole input file."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e


def write_output(path: Path, data: bytes) -> None:
    """
    Write ``data`` to ``path`` atomically.

    The bytes go to a temporary file next to ``path`` which then replaces
    it, so a failure never leaves a truncated file behind.
    """
    try:
        fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e

    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(temp_name, _file_mode(path))
        os.replace(temp_name, path)
    except OSError as e:
        with suppress(OSError):
            os.unlink(temp_name)
        raise FileAccessError(path, e.strerror or str(e)) from e


def _file_mode(path: Path) -> int:
    # keep an existing file's mode, otherwise honor the umask
    try:
        return path.stat().st_mode & 0o777
    except OSError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
