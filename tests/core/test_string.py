"""Tests for crab.core.string module."""

import copy

import pytest

from crab.core.char import Char
from crab.core.panic import Panic
from crab.core.str_view import Str
from crab.core.string import String, join_with


def S(text: str) -> String:
    return String.from_str(text).unwrap()


class TestConstruction:
    """Test owned construction."""

    def test_default(self):
        s = String()
        assert s.size() == 0
        assert s.capacity() == 0
        assert s.empty()

    def test_from_raw_parts(self):
        empty = String.from_raw_parts(None, 0).unwrap()
        assert empty.size() == 0
        assert empty.capacity() == 0

        s = String.from_raw_parts(b"hello", 5).unwrap()
        assert s.size() == 5
        assert s.capacity() >= 5
        assert s == "hello"

        assert String.from_raw_parts(b"\xc0\x80", 2).is_err()

    def test_from_cstr(self):
        s = String.from_cstr(b"").unwrap()
        assert s.size() == 0
        assert s.capacity() == 0

        assert String.from_cstr(b"hello\x00").unwrap() == "hello"
        assert String.from_cstr(b"\xc0\x80\x00").is_err()

    def test_from_utf8_copies(self):
        data = bytearray(b"abc")
        s = String.from_utf8(data).unwrap()
        data[0] = ord("x")
        assert s == "abc"

    def test_from_str(self):
        assert S("hello") == Str.from_str("hello").unwrap()
        assert String.from_str("\ud800").is_err()

    def test_constructor_copies_str(self):
        assert String("héllo") == "héllo"
        assert String(Str.from_str("abc").unwrap()) == "abc"

    def test_with_capacity(self):
        s = String.with_capacity(16)
        assert s.capacity() >= 16
        assert s.empty()

    def test_from_iter(self):
        assert String.from_iter([Char("a"), "bc", Str.from_str("d").unwrap()]) == "abcd"

    def test_from_iter_chars_of_view(self):
        assert String.from_iter(S("你好").chars()) == "你好"


class TestCopyAndMove:
    def test_copy_constructor(self):
        s1 = S("hello")
        s2 = String(s1)
        assert s1.size() == s2.size()
        assert s1.capacity() == s2.capacity()
        assert s1 == s2

    def test_copy_is_independent(self):
        s1 = S("hello")
        s2 = s1.clone()
        s2.push_str(" world")
        assert s1 == "hello"
        assert s2 == "hello world"

    def test_copy_module(self):
        s1 = S("hello")
        s1.reserve(32)
        for s2 in (copy.copy(s1), copy.deepcopy(s1)):
            assert s2 == s1
            assert s2.capacity() == s1.capacity()
            assert s2._buf is not s1._buf

    def test_move(self):
        s1 = S("hello")
        s2 = String.move_from(s1)
        assert s2.size() == 5
        assert s2.capacity() >= 5
        assert s2 == "hello"
        assert s1.size() == 0
        assert s1.capacity() == 0

    def test_moved_from_is_usable(self):
        s1 = S("hello")
        String.move_from(s1)
        s1.push_str("again")
        assert s1 == "again"


class TestComparison:
    def test_operators(self):
        s1 = S("hello")
        s2 = S("world")
        s3 = S("hello")

        assert s1 == s3
        assert s1 == "hello"
        assert not s1 == s2
        assert s1 < s2
        assert not s1 > s2
        assert not s2 < s1
        assert s1 <= s3
        assert s1 >= s3
        assert s1 > String()
        assert String() < s1

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(S("a"))


class TestCapacity:
    def test_reserve(self):
        s = String()
        s.reserve(10)
        assert s.capacity() >= 10
        assert s.size() == 0

        s = S("hello")
        s.reserve(20)
        assert s.capacity() >= 20
        assert s.size() == 5
        assert s == "hello"

    def test_reserve_never_shrinks(self):
        s = String.with_capacity(32)
        s.reserve(4)
        assert s.capacity() >= 32

    def test_reserve_negative_panics(self):
        with pytest.raises(Panic):
            String().reserve(-1)

    def test_growth_is_geometric(self):
        s = String()
        capacities = set()
        for _ in range(1000):
            s.push(Char("x"))
            capacities.add(s.capacity())
            assert s.capacity() >= s.size()
        assert len(capacities) < 20

    def test_shrink_to_fit(self):
        s = String.with_capacity(64)
        s.push_str("abc")
        s.shrink_to_fit()
        assert s.capacity() == 3
        assert s == "abc"

    def test_clear_keeps_capacity(self):
        s = S("hello")
        s.clear()
        assert s.size() == 0
        assert s.capacity() >= 5


class TestMutation:
    def test_push(self):
        s = String()
        for ch in "hello":
            s.push(Char(ch))
        assert s.size() == 5
        assert s == "hello"

    def test_push_multibyte(self):
        s = String()
        s.push("你")
        s.push(Char(0x1F600))
        assert s.size() == 7
        assert s == "你😀"

    def test_push_str(self):
        s = String()
        s.push_str(Str.from_str("hello").unwrap())
        assert s.size() == 5
        assert s == "hello"

        s.push_str(" world")
        assert s.size() == 11
        assert s == "hello world"

    def test_push_str_rejects_bytes(self):
        with pytest.raises(TypeError):
            String().push_str(b"raw")

    def test_push_str_lone_surrogate_panics(self):
        with pytest.raises(Panic, match="not valid UTF-8"):
            String().push_str("a\ud800")

    def test_push_str_self_view(self):
        s = S("ab")
        s.push_str(s.as_str())
        assert s == "abab"

    def test_split_off(self):
        s = S("hello world")
        s2 = s.split_off(6)
        assert s.size() == 6
        assert s2.size() == 5
        assert s == "hello "
        assert s2 == "world"

    def test_split_off_out_of_bounds_panics(self):
        s = S("hello ")
        with pytest.raises(Panic, match="split_off: byte index 10 is out of bounds"):
            s.split_off(10)

    def test_split_off_not_char_boundary_panics(self):
        with pytest.raises(Panic, match="not a char boundary"):
            S("你好").split_off(1)

    def test_split_off_ends(self):
        s = S("abc")
        assert s.split_off(3).empty()
        assert s.split_off(0) == "abc"
        assert s.empty()

    def test_truncate(self):
        s = S("hello world")
        s.truncate(5)
        assert s.size() == 5
        assert s == "hello"

        s.truncate(10)
        assert s.size() == 5

    def test_truncate_not_char_boundary_panics(self):
        s = S("你好，世界")
        with pytest.raises(Panic, match="truncate: byte index 2 is not a char boundary"):
            s.truncate(2)

    def test_pop(self):
        s = S("hello")
        ch = s.pop()
        assert ch.is_some()
        assert ch.unwrap() == Char("o")
        assert s.size() == 4
        assert s == "hell"

        ch = s.pop()
        assert ch.unwrap() == Char("l")
        assert s == "hel"

        s.clear()
        assert s.pop().is_none()

    def test_pop_multibyte(self):
        s = S("a你")
        assert s.pop().unwrap() == Char("你")
        assert s == "a"

    def test_make_ascii_lowercase(self):
        s = S("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
        s.make_ascii_lowercase()
        assert s == "abcdefghijklmnopqrstuvwxyz"

        s = S("HÉLLO")
        s.make_ascii_lowercase()
        assert s == "hÉllo"

    def test_make_ascii_uppercase(self):
        s = S("abcdefghijklmnopqrstuvwxyz")
        s.make_ascii_uppercase()
        assert s == "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

        s = S("héllo")
        s.make_ascii_uppercase()
        assert s == "HéLLO"


class TestOperators:
    def test_plus_equals(self):
        s = S("hello")
        s += Str.from_str(" world").unwrap()
        assert s.size() == 11
        assert s == "hello world"

        s += Char("!")
        assert s.size() == 12
        assert s == "hello world!"

        s += S(" hello")
        assert s.size() == 18
        assert s == "hello world! hello"

    def test_plus_equals_keeps_identity(self):
        s = S("a")
        before = s
        s += "b"
        assert s is before

    def test_plus(self):
        s1 = S("hello")
        s3 = s1 + S(" world")
        assert s3.size() == 11
        assert s3 == "hello world"

        assert (s1 + Str.from_str(" world").unwrap()) == "hello world"
        s5 = s1 + Char("!")
        assert s5.size() == 6
        assert s5 == "hello!"
        assert s1 == "hello"

    def test_repr(self):
        assert repr(S("hi")) == "String('hi')"


class TestViews:
    """Test views borrowed from a String."""

    def test_as_str(self):
        s = S("hello")
        view = s.as_str()
        assert isinstance(view, Str)
        assert view == "hello"

    def test_inherits_read_only_methods(self):
        s = S("  a,b  ")
        assert s.trim_ascii().split(",").collect() == ["a", "b"]
        assert s.find(",").unwrap() == 3
        assert s.slice(2, 3) == "a"

    def test_view_sees_in_place_edits(self):
        s = S("hello")
        view = s.as_str()
        s.make_ascii_uppercase()
        assert view == "HELLO"

    def test_stale_view_not_checked_by_default(self):
        s = S("hello")
        view = s.as_str()
        s.truncate(2)
        assert view.size() == 5

    def test_stale_view_panics_with_borrow_checks(self, borrow_checks):
        s = S("hello")
        view = s.as_str()
        s.truncate(2)
        with pytest.raises(Panic, match="invalidated by mutation"):
            view.size()

    def test_reallocation_invalidates_views(self, borrow_checks):
        s = S("hi")
        view = s.slice(0, 1)
        s.reserve(s.capacity() + 100)
        with pytest.raises(Panic, match="invalidated"):
            view.to_std_string()

    def test_fresh_view_after_mutation(self, borrow_checks):
        s = S("hello")
        s.as_str()
        s.clear()
        s.push_str("bye")
        assert s.as_str() == "bye"


class TestJoinWith:
    def test_join_split(self):
        view = Str.from_str("hello,world").unwrap()
        assert join_with(view.split(","), ".") == S("hello.world")

    def test_join_empty(self):
        assert join_with([], ", ").empty()

    def test_join_mixed_pieces(self):
        assert join_with([Char("a"), "b", S("c")], Char("-")) == "a-b-c"
