"""Unit tests for the attributes module (src/alt extraction)."""

import pytest

from image_descriptor.attributes import (
    ALT_ATTR_RE,
    extract_alt,
    extract_attr,
    extract_src,
)


class TestExtractAttr:
    """Tests for extract_attr() and its src/alt specialisations."""

    @pytest.mark.parametrize("value", ["A red bicycle.", "", "x", "Ünïcødé 猫"])
    def test_alt_value_returned_exactly(self, value):
        tag = f'<img src="a.png" alt="{value}">'
        assert extract_alt(tag) == value

    def test_empty_alt_is_not_none(self):
        """alt="" (decorative) is distinct from a missing alt."""
        assert extract_alt('<img src="a.png" alt="">') == ""
        assert extract_alt('<img src="a.png">') is None

    def test_single_quotes(self):
        assert extract_src("<img src='pics/a.png'>") == "pics/a.png"

    def test_whitespace_around_equals(self):
        assert extract_src('<img src = "a.png">') == "a.png"

    def test_case_insensitive_name(self):
        assert extract_src('<IMG SRC="a.png">') == "a.png"

    def test_missing_src(self):
        assert extract_src('<img alt="x">') is None

    def test_unquoted_value_not_matched(self):
        assert extract_src("<img src=a.png>") is None

    def test_first_match_wins(self):
        assert extract_attr('<img alt="one" alt="two">', "alt") == "one"

    def test_arbitrary_attribute_name(self):
        assert extract_attr('<img width="10" src="a.png">', "width") == "10"


class TestAltAttrRe:
    """Tests for ALT_ATTR_RE (whole-attribute matching)."""

    def test_matches_double_quoted(self):
        m = ALT_ATTR_RE.search('<img alt="old" src="a.png">')
        assert m.group(0) == 'alt="old"'

    def test_matches_single_quoted_empty(self):
        m = ALT_ATTR_RE.search("<img alt='' src=\"a.png\">")
        assert m.group(0) == "alt=''"

    def test_no_alt(self):
        assert ALT_ATTR_RE.search('<img src="a.png">') is None
