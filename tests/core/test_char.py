"""Tests for crab.core.char module."""

import pytest

from crab.core.char import Char
from crab.core.panic import Panic


class TestConstruction:
    """Test building Chars."""

    def test_from_int(self):
        """An int code point is stored as-is."""
        assert Char(0x41).code_point() == 0x41

    def test_from_str(self):
        """A one-character str becomes its code point."""
        assert Char("é").code_point() == 0xE9
        assert Char("é") == Char(0xE9)

    def test_multi_character_str_panics(self):
        """Only single characters are accepted."""
        with pytest.raises(Panic, match="single character"):
            Char("ab")

    def test_surrogate_panics(self):
        """Surrogates are not scalar values."""
        with pytest.raises(Panic, match="invalid Unicode scalar value: 0xd800"):
            Char(0xD800)

    def test_out_of_range_panics(self):
        """Code points above U+10FFFF panic."""
        with pytest.raises(Panic):
            Char(0x110000)

    def test_wrong_type_panics(self):
        """Floats and bools are rejected."""
        with pytest.raises(Panic):
            Char(65.0)
        with pytest.raises(Panic):
            Char(True)

    def test_from_u32(self):
        """from_u32 reports invalid values as none."""
        assert Char.from_u32(0x1F600).unwrap() == Char("😀")
        assert Char.from_u32(0xDFFF).is_none()
        assert Char.from_u32(-1).is_none()


class TestEncoding:
    """Test UTF-8 width and bytes."""

    @pytest.mark.parametrize(
        "ch,width",
        [("a", 1), ("é", 2), ("你", 3), ("😀", 4)],
    )
    def test_len_utf8(self, ch, width):
        """Width matches the encoded length."""
        assert Char(ch).len_utf8() == width
        assert len(Char(ch).encode_utf8()) == width

    def test_encode_utf8(self):
        """Encoding matches Python's codec."""
        assert Char("你").encode_utf8() == "你".encode("utf-8")


class TestAsciiHelpers:
    """Test ASCII classification and case mapping."""

    def test_is_ascii(self):
        assert Char("a").is_ascii()
        assert not Char("é").is_ascii()

    def test_is_ascii_whitespace(self):
        """Vertical tab counts as whitespace."""
        for ch in " \t\n\r\x0b\x0c":
            assert Char(ch).is_ascii_whitespace()
        assert not Char("a").is_ascii_whitespace()
        assert not Char(0xA0).is_ascii_whitespace()

    def test_is_ascii_alphabetic_and_digit(self):
        assert Char("z").is_ascii_alphabetic()
        assert not Char("1").is_ascii_alphabetic()
        assert Char("1").is_ascii_digit()

    def test_case_mapping(self):
        """Only ASCII letters change case."""
        assert Char("A").to_ascii_lowercase() == Char("a")
        assert Char("a").to_ascii_uppercase() == Char("A")
        assert Char("é").to_ascii_uppercase() == Char("é")


class TestProtocol:
    """Test comparisons, hashing and conversions."""

    def test_eq_with_int(self):
        assert Char("a") == 97
        assert Char("a") != "a"

    def test_ordering(self):
        assert Char("a") < Char("b")
        assert Char("b") >= Char("a")
        assert Char("a") < 98

    def test_hash(self):
        assert len({Char("a"), Char(97), Char("b")}) == 2

    def test_conversions(self):
        assert int(Char("a")) == 97
        assert str(Char("你")) == "你"
        assert repr(Char("a")) == "Char('a')"

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Char("a").value = 98
