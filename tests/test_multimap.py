"""Tests for :class:`inimap.multimap.BasicMultiMap`."""

from __future__ import annotations

import pytest

from inimap.multimap import BasicMultiMap


@pytest.fixture()
def mm():
	m = BasicMultiMap()
	m.add("colors", "red")
	m.add("colors", "green")
	m.add("colors", "blue")
	m.add("size", "10")
	return m


def test_absent_key_reads_as_none_and_zero_length():
	m = BasicMultiMap()
	assert m.get("nope") is None
	assert m.get("nope", 3) is None
	assert m.length("nope") == 0
	assert m.get_all("nope") is None
	assert m.remove("nope") is None


def test_last_value_is_the_default_and_index_reads(mm):
	assert mm.get("colors") == "blue"
	assert mm.get("colors", 0) == "red"
	assert mm.get("colors", mm.length("colors") - 1) == mm.get("colors")
	assert mm.get("colors", 7) is None
	assert mm.get("colors", -1) is None


def test_add_at_index_inserts(mm):
	mm.add("colors", "black", 1)
	assert mm.get_all("colors") == ["red", "black", "green", "blue"]
	with pytest.raises(IndexError):
		mm.add("colors", "white", 9)
	with pytest.raises(IndexError):
		mm.add("fresh", "x", 2)
	assert "fresh" not in mm


def test_put_replaces_last_or_indexed_value(mm):
	assert mm.put("colors", "cyan") == "blue"
	assert mm.get_all("colors") == ["red", "green", "cyan"]
	assert mm.put("colors", "pink", 0) == "red"
	assert mm.get("colors", 0) == "pink"
	assert mm.put("new", "1") is None
	assert mm.get_all("new") == ["1"]
	with pytest.raises(IndexError):
		mm.put("colors", "x", 5)


def test_remove_whole_key_or_single_index(mm):
	assert mm.remove("colors", 1) == "green"
	assert mm.get_all("colors") == ["red", "blue"]
	assert mm.remove("colors") == "blue"
	assert "colors" not in mm
	assert mm.remove("size", 0) == "10"
	assert "size" not in mm


def test_put_all_replaces_and_empty_removes(mm):
	old = mm.put_all("colors", ["a", "b"])
	assert old == ["red", "green", "blue"]
	assert mm.get_all("colors") == ["a", "b"]
	assert mm.put_all("colors", []) == ["a", "b"]
	assert "colors" not in mm


def test_mapping_protocol_uses_last_values(mm):
	assert list(mm) == ["colors", "size"]
	assert len(mm) == 2
	assert dict(mm) == {"colors": "blue", "size": "10"}
	mm["size"] = "12"
	assert mm.get_all("size") == ["12"]
	del mm["size"]
	with pytest.raises(KeyError):
		mm["size"]
	with pytest.raises(KeyError):
		del mm["size"]


def test_none_is_a_storable_value():
	m = BasicMultiMap()
	m.add("k", None)
	assert m.length("k") == 1
	assert m.get("k") is None
	assert m["k"] is None


def test_comments_follow_their_key(mm):
	assert mm.get_comment("size") is None
	assert mm.put_comment("size", "in cm") is None
	assert mm.put_comment("size", "in mm") == "in cm"
	assert mm.get_comment("size") == "in mm"
	mm.remove("size")
	assert mm.get_comment("size") is None


def test_copy_and_update_keep_sequences_and_comments(mm):
	mm.put_comment("colors", "palette")
	dup = mm.copy()
	assert dup.get_all("colors") == ["red", "green", "blue"]
	assert dup.get_comment("colors") == "palette"
	dup.add("colors", "white")
	assert mm.length("colors") == 3

	other = BasicMultiMap({"size": "1", "extra": "x"})
	mm.update(other)
	assert mm.get_all("size") == ["1"]
	assert mm.get("extra") == "x"
