"""Tests for the ARFF parser state machine."""

import io
import logging

import pytest

from arffset.data.attributes import AttributeType
from arffset.data.parser import ArffParser
from arffset.data.sources import open_source
from arffset.errors import ArffReadError, FormatError, MalformedRowError, UnsupportedAttributeTypeError

from .conftest import IRIS, MIXED


def parse(text: str) -> ArffParser:
    return ArffParser().parse(io.StringIO(text))


class FailingStream:
    """Yields a few lines, then raises like a broken network stream."""

    def __init__(self, lines):
        self._lines = list(lines)

    def __iter__(self):
        yield from self._lines
        raise OSError("connection reset")


class TestHeader:
    def test_relation_and_attributes(self):
        parser = parse(IRIS)
        assert parser.relation_name == "iris"
        assert parser.column_names == ["sepallength", "sepalwidth", "petallength", "petalwidth", "class"]
        assert parser.column_types[-1] is AttributeType.NOMINAL
        assert parser.att_lookup["class"] == 4

    def test_quoted_relation_name(self):
        assert parse(MIXED).relation_name == "mixed data"

    def test_last_relation_wins(self):
        parser = parse("@relation first\n@relation second\n@attribute a numeric\n@data\n")
        assert parser.relation_name == "second"

    def test_header_only_stops_at_data(self):
        parser = ArffParser().parse_header(io.StringIO(IRIS + "this is not,valid\n"))
        assert len(parser.attributes) == 5
        assert parser.data == []

    def test_header_only_does_not_read_past_data(self):
        stream = FailingStream(["@relation r\n", "@attribute a numeric\n", "@data\n"])
        parser = ArffParser().parse_header(stream)
        assert parser.column_names == ["a"]

    def test_duplicate_names_overwrite_lookup(self, caplog):
        text = "@relation r\n@attribute a numeric\n@attribute a string\n@data\n1,x\n"
        with caplog.at_level(logging.WARNING, logger="arffset.data.parser"):
            parser = parse(text)
        assert len(parser.attributes) == 2
        assert parser.att_lookup == {"a": 1}
        assert parser.data == [["1.0", "x"]]
        assert "Duplicate attribute name" in caplog.text

    def test_unsupported_type_reports_line(self):
        with pytest.raises(UnsupportedAttributeTypeError) as excinfo:
            parse("@relation r\n\n@attribute a relational\n@data\n")
        assert excinfo.value.line_number == 3


class TestData:
    def test_iris_rows(self):
        parser = parse(IRIS)
        assert len(parser.data) == 6
        assert parser.data[0] == ["5.1", "3.5", "1.4", "0.2", "setosa"]

    def test_comments_and_blank_lines_are_skipped(self):
        parser = parse("@relation r\n@attribute a numeric\n@data\n% comment\n\n   \n1\n")
        assert parser.data == [["1.0"]]

    def test_numeric_canonical_form(self):
        parser = parse("@relation r\n@attribute a numeric\n@data\n1\n2.50\n1e3\n")
        assert [row[0] for row in parser.data] == ["1.0", "2.5", "1000.0"]

    def test_missing_marker_for_every_type(self):
        parser = parse(MIXED.replace("1,'alice',2020-01-02,red,0.5,3", "?,?,?,?,?,?"))
        assert parser.data[0] == [None] * 6

    def test_quoted_missing_marker_is_a_value(self):
        parser = parse("@relation r\n@attribute s string\n@data\n'?'\n")
        assert parser.data == [["?"]]

    def test_quoted_cells_are_unquoted_and_unescaped(self):
        parser = parse("@relation r\n@attribute s string\n@attribute t string\n@data\n'a, b','it\\'s'\n")
        assert parser.data == [["a, b", "it's"]]

    def test_date_cells_become_epoch_millis(self):
        parser = parse(MIXED)
        assert parser.data[0][2] == "1577923200000"
        assert parser.data[1][2] == "1578009600000"

    def test_nominal_values_are_not_validated(self):
        parser = parse("@relation r\n@attribute c {a,b}\n@data\nz\n")
        assert parser.data == [["z"]]

    def test_extra_tokens_dropped_and_short_rows_kept_short(self):
        parser = parse("@relation r\n@attribute a numeric\n@attribute b numeric\n@data\n1,2,3\n4\n")
        assert parser.data == [["1.0", "2.0"], ["4.0"]]

    def test_malformed_numeric_reports_line(self):
        text = "@relation r\n@attribute a numeric\n@data\n1\n% comment\nabc\n"
        with pytest.raises(MalformedRowError) as excinfo:
            parse(text)
        assert excinfo.value.line_number == 6
        assert "line #6" in str(excinfo.value)
        assert isinstance(excinfo.value, FormatError)

    def test_malformed_date(self):
        with pytest.raises(MalformedRowError):
            parse("@relation r\n@attribute d date yyyy-MM-dd\n@data\n02/01/2020\n")

    def test_read_failure_is_wrapped_with_line_number(self):
        stream = FailingStream(["@relation r\n", "@attribute a numeric\n", "@data\n", "1\n"])
        with pytest.raises(ArffReadError) as excinfo:
            ArffParser().parse(stream)
        assert excinfo.value.line_number == 5
        assert isinstance(excinfo.value, OSError)

    def test_truncated_gzip_is_wrapped(self, truncated_gz_file):
        with pytest.raises(ArffReadError) as excinfo:
            with open_source(truncated_gz_file) as stream:
                ArffParser().parse(stream)
        assert excinfo.value.line_number is not None

    def test_unexpected_line_failure_is_wrapped(self, monkeypatch):
        def explode(self, line):
            raise KeyError(line)

        monkeypatch.setattr(ArffParser, "_header_line", explode)
        with pytest.raises(FormatError) as excinfo:
            parse("% comment\n@relation r\n")
        assert excinfo.value.line_number == 2


class TestReuse:
    def test_state_is_reset_between_runs(self):
        parser = ArffParser()
        parser.parse(io.StringIO(IRIS))
        parser.parse(io.StringIO("@relation other\n@attribute x numeric\n@data\n1\n"))
        assert parser.relation_name == "other"
        assert parser.column_names == ["x"]
        assert parser.att_lookup == {"x": 0}
        assert parser.data == [["1.0"]]

    def test_header_run_after_full_run_clears_data(self):
        parser = ArffParser()
        parser.parse(io.StringIO(IRIS))
        parser.parse_header(io.StringIO(IRIS))
        assert parser.data == []
        assert len(parser.attributes) == 5
