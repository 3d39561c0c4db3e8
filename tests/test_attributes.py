"""Tests for @attribute decoding and date patterns."""

import pytest

from arffset.data.attributes import AttributeType, parse_attribute
from arffset.data.dateformat import DEFAULT_PATTERN, DateFormat, translate_pattern
from arffset.data.parser import ArffParser
from arffset.errors import FormatError, InvalidDateFormatError, MalformedRowError, UnsupportedAttributeTypeError


class TestParseAttribute:
    @pytest.mark.parametrize("token", ["numeric", "NUMERIC", "real", "Real", "integer"])
    def test_numeric_aliases(self, token):
        attribute = parse_attribute(f"@attribute width {token}")
        assert attribute.name == "width"
        assert attribute.type is AttributeType.NUMERIC

    def test_string(self):
        assert parse_attribute("@attribute comment string").type is AttributeType.STRING

    def test_nominal_keeps_declared_values(self):
        attribute = parse_attribute("@attribute class {setosa, versicolor,'vir ginica'}")
        assert attribute.type is AttributeType.NOMINAL
        assert attribute.nominal_values == ("setosa", "versicolor", "vir ginica")

    def test_nominal_without_space_before_brace(self):
        attribute = parse_attribute("@attribute class{a,b}")
        assert attribute.name == "class"
        assert attribute.type is AttributeType.NOMINAL

    def test_quoted_names(self):
        assert parse_attribute("@attribute 'petal length' real").name == "petal length"
        assert parse_attribute('@attribute "petal width" real').name == "petal width"

    def test_tabs_and_uppercase_keyword(self):
        attribute = parse_attribute("@ATTRIBUTE\tsepallength\tREAL")
        assert attribute.name == "sepallength"
        assert attribute.type is AttributeType.NUMERIC

    def test_date_with_quoted_format(self):
        attribute = parse_attribute('@attribute when date "yyyy-MM-dd"')
        assert attribute.type is AttributeType.DATE
        assert attribute.date_format == "yyyy-MM-dd"

    def test_date_with_single_quoted_format(self):
        attribute = parse_attribute("@attribute when date 'yyyy-MM-dd HH:mm'")
        assert attribute.date_format == "yyyy-MM-dd HH:mm"

    def test_date_without_format_uses_default(self):
        assert parse_attribute("@attribute when date").date_format == DEFAULT_PATTERN

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedAttributeTypeError):
            parse_attribute("@attribute blob relational")

    def test_invalid_date_format(self):
        with pytest.raises(InvalidDateFormatError):
            parse_attribute("@attribute when date 'yyyy-QQ'")

    def test_errors_are_format_errors(self):
        with pytest.raises(FormatError):
            parse_attribute("@attribute x")

    def test_to_dict(self):
        assert parse_attribute("@attribute d date yyyy").to_dict() == {"name": "d", "type": "DATE", "format": "yyyy"}
        assert parse_attribute("@attribute x real").to_dict() == {"name": "x", "type": "NUMERIC"}


class TestDateFormat:
    @pytest.mark.parametrize(
        "pattern, expected",
        [
            ("yyyy-MM-dd'T'HH:mm:ss", "%Y-%m-%dT%H:%M:%S"),
            ("dd/MM/yy", "%d/%m/%y"),
            ("yyyy''MM", "%Y'%m"),
            ("d MMM yyyy hh:mm a", "%d %b %Y %I:%M %p"),
            ("yyyy%", "%Y%%"),
        ],
    )
    def test_translate_pattern(self, pattern, expected):
        assert translate_pattern(pattern) == expected

    def test_unsupported_letter(self):
        with pytest.raises(ValueError):
            translate_pattern("yyyy-ww")

    def test_unterminated_literal(self):
        with pytest.raises(ValueError):
            translate_pattern("yyyy'T")

    def test_epoch_millis_in_utc(self):
        assert DateFormat("yyyy-MM-dd").to_epoch_millis("2020-01-02") == 1577923200000

    def test_epoch_millis_with_fraction(self):
        fmt = DateFormat("yyyy-MM-dd HH:mm:ss.SSS")
        assert fmt.to_epoch_millis("1970-01-01 00:00:01.250") == 1250

    def test_explicit_offset_is_honoured(self):
        fmt = DateFormat("yyyy-MM-dd HH:mm Z")
        assert fmt.to_epoch_millis("1970-01-01 01:00 +0100") == 0

    def test_bad_value(self):
        with pytest.raises(ValueError):
            DateFormat("yyyy-MM-dd").to_epoch_millis("02/01/2020")

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1970-01-01 00:00:00.5", 5),
            ("1970-01-01 00:00:00.05", 5),
            ("1970-01-01 00:00:02.250", 2250),
        ],
    )
    def test_single_s_counts_milliseconds(self, text, expected):
        assert DateFormat("yyyy-MM-dd HH:mm:ss.S").to_epoch_millis(text) == expected

    def test_repeated_millisecond_field_is_rejected(self):
        with pytest.raises(ValueError):
            DateFormat("ss.SSS SSS")

    def test_millis_and_zone_letters_have_no_strptime_directive(self):
        with pytest.raises(ValueError):
            translate_pattern("HH:mm:ss.SSS")
        with pytest.raises(ValueError):
            translate_pattern("HH:mm z")

    @pytest.mark.parametrize("zone", ["UTC", "GMT", "utc", "Z"])
    def test_utc_zone_names(self, zone):
        fmt = DateFormat("yyyy-MM-dd HH:mm z")
        assert fmt.to_epoch_millis(f"1970-01-01 00:01 {zone}") == 60000

    def test_other_zone_names_are_rejected(self):
        with pytest.raises(ValueError, match="time zone"):
            DateFormat("yyyy-MM-dd HH:mm z").to_epoch_millis("1970-01-01 00:01 CET")

    def test_zone_name_cell_in_parser_is_malformed(self):
        text = "@relation r\n@attribute d date 'yyyy-MM-dd HH:mm z'\n@data\n'1970-01-01 00:00 CET'\n"
        with pytest.raises(MalformedRowError) as excinfo:
            ArffParser().parse(text.splitlines(keepends=True))
        assert excinfo.value.line_number == 4
