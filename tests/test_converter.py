"""Tests for the conversion driver."""

import io
import json

import pytest

from scribe.converter import DataConverter, convert, write_output
from scribe.errors import (
    ConversionError,
    FileAccessError,
    ParseError,
    QueryError,
    UnrepresentableError,
    UnsupportedFeature,
    UnsupportedFormat,
)
from scribe.formats import Format


@pytest.fixture
def converter():
    return DataConverter()


class TestConvert:
    """Test in-memory conversion."""

    def test_json_yaml_json(self, converter):
        """Test that JSON survives a trip through YAML."""
        original = b'{"a": 1, "b": [true, null, "x"]}'

        as_yaml = converter.convert(original, "json", "yaml")
        back = converter.convert(as_yaml, "yaml", "json")

        data = json.loads(back)
        assert data == {"a": 1, "b": [True, None, "x"]}
        assert list(data) == ["a", "b"]

    def test_integer_float_distinction_survives(self, converter):
        """Test that 1 and 1.0 stay distinct across formats."""
        out = converter.convert(b'{"i": 1, "f": 1.0}', "json", "yaml")
        back = converter.convert(out, "yaml", "json")

        assert json.loads(back) == {"i": 1, "f": 1.0}
        assert b'"f": 1.0' in back

    def test_array_to_toml_fails(self, converter):
        """Test that a non-mapping root cannot become TOML."""
        with pytest.raises(UnrepresentableError) as exc_info:
            converter.convert(b"[1, 2, 3]", "json", "toml")

        assert exc_info.value.format == "toml"

    def test_array_to_yaml_succeeds(self, converter):
        """Test that the same array converts to YAML."""
        assert converter.convert(b"[1, 2, 3]", "json", "yaml") == b"- 1\n- 2\n- 3\n"

    def test_quoted_yes_stays_string(self, converter):
        """Test that a quoted YAML 'yes' is a JSON string."""
        out = converter.convert(b"answer: 'yes'\n", "yaml", "json")
        assert json.loads(out) == {"answer": "yes"}

    def test_toml_array_of_tables_to_json(self, converter):
        """Test TOML arrays of tables."""
        out = converter.convert(b"[[a]]\nb = 1\n\n[[a]]\nb = 2", "toml", "json")
        assert json.loads(out) == {"a": [{"b": 1}, {"b": 2}]}

    def test_json_to_toml(self, converter):
        """Test a JSON object becoming TOML."""
        out = converter.convert(b'{"name": "x", "db": {"port": 5432}}', "json", "toml")
        assert out == b'name = "x"\n\n[db]\nport = 5432\n'

    def test_yaml_null_to_toml_fails(self, converter):
        """Test that nulls cannot become TOML."""
        with pytest.raises(UnrepresentableError):
            converter.convert(b"a: ~\n", "yaml", "toml")

    def test_parse_error_carries_format(self, converter):
        """Test that parse errors name the source format."""
        with pytest.raises(ParseError) as exc_info:
            converter.convert(b'{"a": }', "json", "yaml")

        assert exc_info.value.format == "json"
        assert str(exc_info.value).startswith("parse error (json)")

    def test_invalid_utf8(self, converter):
        """Test bytes that are not UTF-8."""
        with pytest.raises(ParseError):
            converter.convert(b'{"a": "\xff"}', "json", "yaml")

    def test_utf8_bom_accepted(self, converter):
        """Test input starting with a byte order mark."""
        out = converter.convert(b'\xef\xbb\xbf{"a": 1}', "json", "json")
        assert json.loads(out) == {"a": 1}

    def test_multi_document_yaml(self, converter):
        """Test that multi-document YAML is unsupported."""
        with pytest.raises(UnsupportedFeature):
            converter.convert(b"a: 1\n---\nb: 2\n", "yaml", "json")

    def test_unknown_formats(self, converter):
        """Test unknown format names on either side."""
        with pytest.raises(UnsupportedFormat):
            converter.convert(b"{}", "xml", "json")

        with pytest.raises(UnsupportedFormat):
            converter.convert(b"{}", "json", "ini")

    def test_format_enum_and_aliases(self, converter):
        """Test Format members and the yml alias."""
        assert converter.convert(b"a: 1\n", Format.YAML, "JSON") == b'{\n  "a": 1\n}\n'
        assert converter.convert(b"a: 1\n", "yml", "json") == b'{\n  "a": 1\n}\n'

    def test_minify(self):
        """Test minified JSON output."""
        converter = DataConverter(minify=True)
        assert converter.convert(b"a: 1\nb: [x]\n", "yaml", "json") == b'{"a":1,"b":["x"]}\n'

    def test_indent(self):
        """Test custom indentation."""
        converter = DataConverter(indent=4)
        assert converter.convert(b"a: 1\n", "yaml", "json") == b'{\n    "a": 1\n}\n'


class TestQuery:
    """Test JMESPath queries."""

    def test_query(self, converter):
        """Test extracting part of a document."""
        data = b'{"users": [{"name": "a", "admin": true}, {"name": "b", "admin": false}]}'

        out = converter.convert(data, "json", "json", query="users[?admin].name")

        assert json.loads(out) == ["a"]

    def test_invalid_query(self, converter):
        """Test a malformed expression."""
        with pytest.raises(QueryError) as exc_info:
            converter.convert(b"{}", "json", "json", query="users[")

        assert exc_info.value.stage == "query"


class TestConvertFunction:
    """Test the sink-based convert() function."""

    def test_writes_to_sink(self):
        """Test a successful conversion."""
        sink = io.BytesIO()
        convert(b'{"a": [1, 2]}', "json", sink, "yaml")
        assert sink.getvalue() == b"a:\n- 1\n- 2\n"

    def test_sink_untouched_on_failure(self):
        """Test that a failed conversion writes nothing."""
        sink = io.BytesIO()

        with pytest.raises(UnrepresentableError):
            convert(b"[1, 2, 3]", "json", sink, "toml")

        assert sink.getvalue() == b""

    def test_options(self):
        """Test passing converter options."""
        sink = io.BytesIO()
        convert(b"a: 1\n", "yaml", sink, "json", minify=True)
        assert sink.getvalue() == b'{"a":1}\n'


class TestConvertFile:
    """Test file-based conversion."""

    def test_convert_by_extension(self, converter, tmp_path):
        """Test formats inferred from extensions."""
        source = tmp_path / "config.JSON"
        source.write_text('{"name": "x"}')
        target = tmp_path / "config.yaml"

        written = converter.convert_file(source, target)

        assert written == target
        assert target.read_text() == "name: x\n"

    def test_unknown_output_extension(self, converter, tmp_path):
        """Test that .xml fails before any file is touched."""
        source = tmp_path / "data.json"
        source.write_text('{"a": 1}')
        target = tmp_path / "data.xml"

        with pytest.raises(UnsupportedFormat):
            converter.convert_file(source, target)

        assert not target.exists()

    def test_unknown_input_extension_before_io(self, converter, tmp_path):
        """Test that the input is not read when its format is unknown."""
        with pytest.raises(UnsupportedFormat):
            converter.convert_file(tmp_path / "missing.txt", tmp_path / "out.json")

    def test_explicit_formats_override_extensions(self, converter, tmp_path):
        """Test --from/--format style overrides."""
        source = tmp_path / "pipeline.conf"
        source.write_text("a: 1\n")
        target = tmp_path / "pipeline.out"

        converter.convert_file(source, target, from_format="yaml", to_format="json")

        assert json.loads(target.read_text()) == {"a": 1}

    def test_derived_output_path(self, converter, tmp_path):
        """Test the output path derived from the input path."""
        source = tmp_path / "settings.json"
        source.write_text('{"a": 1}')

        written = converter.convert_file(source, to_format="yaml")

        assert written == tmp_path / "settings.yml"
        assert written.read_text() == "a: 1\n"

    def test_derived_path_cannot_overwrite_input(self, converter, tmp_path):
        """Test that the input is never overwritten by a derived path."""
        source = tmp_path / "settings.json"
        source.write_text('{"a": 1}')

        with pytest.raises(ConversionError):
            converter.convert_file(source, to_format="json")

        assert source.read_text() == '{"a": 1}'

    def test_output_or_format_required(self, converter, tmp_path):
        """Test that one of output path and format is needed."""
        with pytest.raises(ConversionError):
            converter.convert_file(tmp_path / "a.json")

    def test_missing_input(self, converter, tmp_path):
        """Test a missing input file."""
        source = tmp_path / "missing.json"

        with pytest.raises(FileAccessError) as exc_info:
            converter.convert_file(source, tmp_path / "out.yaml")

        assert exc_info.value.path == source
        assert str(source) in str(exc_info.value)

    def test_no_output_on_emit_failure(self, converter, tmp_path):
        """Test that a failed emit creates no output file."""
        source = tmp_path / "list.json"
        source.write_text("[1, 2, 3]")
        target = tmp_path / "list.toml"

        with pytest.raises(UnrepresentableError):
            converter.convert_file(source, target)

        assert not target.exists()
        assert list(tmp_path.iterdir()) == [source]

    def test_existing_output_kept_on_failure(self, converter, tmp_path):
        """Test that an existing output file is not truncated."""
        source = tmp_path / "bad.json"
        source.write_text("{not json")
        target = tmp_path / "out.yaml"
        target.write_text("keep: me\n")

        with pytest.raises(ParseError):
            converter.convert_file(source, target)

        assert target.read_text() == "keep: me\n"

    def test_missing_output_directory(self, converter, tmp_path):
        """Test writing into a directory that does not exist."""
        source = tmp_path / "a.json"
        source.write_text("{}")

        with pytest.raises(FileAccessError):
            converter.convert_file(source, tmp_path / "nope" / "a.yaml")


class TestWriteOutput:
    """Test atomic output writing."""

    def test_replaces_existing_file(self, tmp_path):
        """Test overwriting an existing file."""
        target = tmp_path / "out.json"
        target.write_text("old")

        write_output(target, b"new")

        assert target.read_bytes() == b"new"
        assert list(tmp_path.iterdir()) == [target]
