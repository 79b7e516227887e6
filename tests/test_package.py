"""Tests for the top-level crab package exports."""

import crab
from crab import Char, Ok, Option, Str, String, i32


class TestExports:
    def test_version(self):
        assert crab.__version__ == "0.1.0"

    def test_all_names_resolve(self):
        for name in crab.__all__:
            assert getattr(crab, name) is not None

    def test_end_to_end(self):
        view = Str.from_utf8(b"id=42").unwrap()
        assert view.strip_prefix("id=").unwrap().parse(i32) == Ok(42)

        s = String.from_str("hello").unwrap()
        s += " world"
        assert str(s.split_off(5)) == " world"
        assert s.pop() == Option(Char("o"))
