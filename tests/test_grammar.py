"""Tests for grammar.py - sections, keys, values, pairs, and where they break."""

import pytest

from inidb.grammar import parse_section, parse_key, parse_value, parse_pair
from inidb.storage import Pair


class TestSection:

    @pytest.mark.parametrize("line,name", [
        ("[section]", "section"),
        ("[  section  ]", "section"),
        (" [ section ] ", "section"),
        ("[section] ; section", "section"),
        ("[section]# comment", "section"),
        ("[This is a section]", "This is a section"),
        ("[_section_here_ ]", "_section_here_"),
        ("[section2]", "section2"),
        ("[section]\n", "section"),
        ("[section]\r\n", "section"),
    ])
    def test_valid(self, line, name):
        result = parse_section(line)
        assert result.ok
        assert result.value == name

    @pytest.mark.parametrize("line,offset", [
        ("section", 0),
        ("", 0),
        ("  ", 2),
        ("[Too  many]", 6),
        ("[section   section]", 11),
        ("# [This is a section]", 21),
        ("# comment here", 14),
        ("[1section]", 1),
        ("[This is a-section]", 10),
        ("x[section]", 0),
        ("[a] b", 4),
        ("[a\tb]", 3),
        ("[section", 8),
        ("[]", 1),
    ])
    def test_invalid(self, line, offset):
        result = parse_section(line)
        assert not result.ok
        assert result.offset == offset

    def test_none(self):
        result = parse_section(None)
        assert not result.ok
        assert result.offset == 0

    def test_nul_ends_line(self):
        result = parse_section("[section]\0garbage")
        assert result.ok
        assert result.value == "section"

    def test_longest_name(self):
        name = "a" * 255
        assert parse_section(f"[{name}]").value == name

    def test_name_too_long(self):
        result = parse_section("[" + "a" * 256 + "]")
        assert not result.ok
        assert result.offset == 256

    def test_custom_limit(self):
        result = parse_section("[abcd]", max_string=3)
        assert not result.ok
        assert result.offset == 4


class TestKey:

    @pytest.mark.parametrize("line,key", [
        ("key=value", "key"),
        ("key = value", "key"),
        ("   key   =   value", "key"),
        ("\tkey\t=value", "key"),
        ("_key=value", "_key"),
        ("key_2=value", "key_2"),
        ("KEY=value", "KEY"),
    ])
    def test_valid(self, line, key):
        result = parse_key(line)
        assert result.ok
        assert result.value == key

    @pytest.mark.parametrize("line,offset", [
        ("1key=value", 0),
        ("-key=value", 0),
        ("]key=value", 0),
        ("key$=value", 3),
        ("ke(y=value", 2),
        ("k:ey=value", 1),
        ("key key=value", 4),
        ("key\tkey=value", 4),
        ("key", 3),
        ("  1key=value", 2),
        ("clé=value", 2),
    ])
    def test_invalid(self, line, offset):
        result = parse_key(line)
        assert not result.ok
        assert result.offset == offset

    def test_longest_key(self):
        key = "k" * 255
        assert parse_key(f"{key}=v").value == key

    def test_key_too_long(self):
        result = parse_key("k" * 256 + "=v")
        assert not result.ok
        assert result.offset == 255

    def test_key_too_long_indented(self):
        result = parse_key("  " + "k" * 256 + "=v")
        assert result.offset == 257

    def test_custom_limit(self):
        result = parse_key("abcd=1", max_string=3)
        assert not result.ok
        assert result.offset == 3


class TestValue:

    @pytest.mark.parametrize("line,value", [
        ("key=value", "value"),
        (" key = value ", "value"),
        ("key=\tvalue\t", "value"),
        ("key=value value", "value value"),
        ("key=  \tvalue value  \t", "value value"),
        ("key=value ; comment", "value"),
        ("key=value value; comment", "value value"),
        ("key=value# comment", "value"),
        ("key = 0123456789", "0123456789"),
        ("key=~!@$%^&*()_+-{}|\\:'<>?,./", "~!@$%^&*()_+-{}|\\:'<>?,./"),
        ("value = 2 + 2 = 4", "2 + 2 = 4"),
        ("ip=192.168.0.1", "192.168.0.1"),
        ("path=/usr/local/bin", "/usr/local/bin"),
        ("path=C:\\Windows\\System32", "C:\\Windows\\System32"),
        ("name=café", "café"),
        ('key="this is a value"', "this is a value"),
        ('key = "  padded   inside  "  ; ok', "  padded   inside  "),
        ("key=", ""),
        ("key=   ", ""),
        ('key=""', ""),
    ])
    def test_valid(self, line, value):
        result = parse_value(line)
        assert result.ok
        assert result.value == value

    @pytest.mark.parametrize("line,offset", [
        ("key=value  value", 11),
        ('key="string right "here""', 19),
        ('key= "value', 11),
        ('key= value"', 10),
        ("key=[value", 4),
        ("key=value]", 9),
        ("key=va\nlue", 7),
        ("key=va\tlue", 7),
        ('key="this is a # bad string"', 15),
        ("keyvalue", 8),
        ("", 0),
    ])
    def test_invalid(self, line, offset):
        result = parse_value(line)
        assert not result.ok
        assert result.offset == offset

    def test_value_after_long_key(self):
        result = parse_value("D" * 1032 + "=")
        assert result.ok
        assert result.value == ""

    def test_longest_value(self):
        value = "v" * 255
        assert parse_value(f"k={value}").value == value

    def test_value_too_long(self):
        result = parse_value("k=" + "v" * 256)
        assert not result.ok
        assert result.offset == 257

    def test_quoted_value_too_long(self):
        result = parse_value('k="' + "v" * 256 + '"')
        assert not result.ok
        assert result.offset == 258


class TestPair:

    @pytest.mark.parametrize("line,key,value", [
        ("key=value", "key", "value"),
        ("  key  =  value  ", "key", "value"),
        ("key=value  \t ; comment here", "key", "value"),
        ("key=this is a value", "key", "this is a value"),
        ('key="quoted  value"', "key", "quoted  value"),
    ])
    def test_valid(self, line, key, value):
        result = parse_pair(line)
        assert result.ok
        assert result.value == Pair(key, value)
        assert result.offset == 0

    @pytest.mark.parametrize("line,offset", [
        ("1key=value", 0),
        ("key=va[lue", 6),
        ("=value", 0),
        ("#key=value", 10),
        ('key="unfinished string', 22),
        ("key", 3),
        ("", 0),
        ("[section]", 0),
    ])
    def test_invalid(self, line, offset):
        result = parse_pair(line)
        assert not result.ok
        assert result.value is None
        assert result.offset == offset

    def test_none(self):
        assert not parse_pair(None).ok
