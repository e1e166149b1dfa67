"""CLI interface for scribe."""

import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .converter import DataConverter
from .errors import ConversionError
from .shared.cli import error, handle_errors, info, success
from .shared.logger import setup_logger

FORMAT_METAVAR = "[json|yaml|toml]"


@click.command()
@click.argument("input_file", metavar="INPUT", type=click.Path(dir_okay=False, path_type=Path))
@click.argument(
    "output_file",
    metavar="[OUTPUT]",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--format",
    "-f",
    "to_format",
    metavar=FORMAT_METAVAR,
    help="Output format (overrides the OUTPUT extension; required without OUTPUT)",
)
@click.option(
    "--from",
    "-i",
    "from_format",
    metavar=FORMAT_METAVAR,
    help="Input format (overrides the INPUT extension)",
)
@click.option(
    "--query",
    "-q",
    help="JMESPath query to extract data before writing",
)
@click.option(
    "--minify",
    is_flag=True,
    help="Minify output (JSON only)",
)
@click.option(
    "--indent",
    type=click.IntRange(min=1),
    default=2,
    show_default=True,
    help="Indentation level",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.version_option(__version__, prog_name="scribe")
@handle_errors
def main(
    input_file: Path,
    output_file: Optional[Path],
    to_format: Optional[str],
    from_format: Optional[str],
    query: Optional[str],
    minify: bool,
    indent: int,
    verbose: bool,
):
    """
    Scribe - Convert documents between JSON, YAML, and TOML.

    Formats are inferred from the file extensions (.json, .yaml/.yml,
    .toml) unless given explicitly.

    Examples:

        \b
        # Convert JSON to YAML
        scribe config.json config.yaml

        \b
        # Write settings.toml next to the input
        scribe settings.json -f toml

        \b
        # Read a file with a non-standard extension
        scribe --from yaml pipeline.conf pipeline.json

        \b
        # Query and convert
        scribe users.json admins.yaml --query 'users[?admin]'

        \b
        # Minify JSON
        scribe data.yaml data.json --minify
    """
    # Setup logging
    log_level = "DEBUG" if verbose else "INFO"
    setup_logger(__name__, level=log_level)

    if output_file is None and to_format is None:
        raise click.UsageError("OUTPUT is required unless --format is given")

    converter = DataConverter(indent=indent, minify=minify)
    info(f"Converting {input_file}")

    try:
        written = converter.convert_file(
            input_file,
            output_file,
            from_format=from_format,
            to_format=to_format,
            query=query,
        )
    except ConversionError as e:
        error(str(e))
        sys.exit(1)

    success(f"Wrote {input_file} to {written}")


if __name__ == "__main__":
    main()
