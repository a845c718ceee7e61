"""Bean binding through :class:`inimap.optionmap.BasicOptionMap`."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

import pytest

from inimap.beans import BeanAccess, bean_properties
from inimap.errors import BindingError
from inimap.optionmap import BasicOptionMap


class Color(enum.Enum):
	RED = "r"
	GREEN = "g"


@dataclass
class Dwarf:
	name: Optional[str] = None
	age: Optional[int] = None
	weight: Optional[float] = None
	fortune: List[int] = field(default_factory=list)
	color: Optional[Color] = None
	KIND: ClassVar[str] = "dwarf"


class Server:
	host: str
	port: int = 80
	tags: list[str]

	def url(self) -> str:
		return f"http://{self.host}:{self.port}"


@dataclass(frozen=True)
class Frozen:
	value: int = 0


def test_bean_properties_skip_classvars_and_mark_sequences():
	props = {p.name: p for p in bean_properties(Dwarf)}
	assert list(props) == ["name", "age", "weight", "fortune", "color"]
	assert props["fortune"].indexed and props["fortune"].type is int
	assert not props["age"].indexed


@pytest.mark.parametrize(
	("prefix", "first_upper", "expected"),
	[
		(None, False, "age"),
		("app.", False, "app.age"),
		(None, True, "Age"),
		("app.", True, "app.Age"),
	],
)
def test_access_transforms_property_names(prefix, first_upper, expected):
	opts = BasicOptionMap(first_upper)
	access = opts.new_access(prefix)
	assert isinstance(access, BeanAccess)
	assert access.transform("age") == expected
	access.prop_set("age", "63")
	assert opts.get(expected) == "63"
	assert access.prop_length("age") == 1


def test_access_delegates_every_capability():
	opts = BasicOptionMap()
	opts.add("base", "7")
	access = opts.new_access("x.")
	access.prop_add("n", "${base}")
	access.prop_add("n", "2")
	assert access.prop_get("n") == "2"
	assert access.prop_get("n", 0) == "7"
	assert access.prop_set("n", "3", 0) == "${base}"
	assert access.prop_length("n") == 2
	assert access.prop_del("n") == "2"
	assert "x.n" not in opts


def test_project_to_fills_bean_fields():
	opts = BasicOptionMap()
	opts.add("unit", "63")
	opts.add("name", "Doc")
	opts.add("age", "${unit}")
	opts.add("weight", "49.5")
	opts.add("fortune", "11")
	opts.add("fortune", "33")
	opts.add("color", "GREEN")

	dwarf = opts.project_to(Dwarf())
	assert dwarf == Dwarf(name="Doc", age=63, weight=49.5, fortune=[11, 33], color=Color.GREEN)


def test_project_to_keeps_fields_without_stored_values():
	opts = BasicOptionMap()
	opts.add("age", "10")
	dwarf = opts.project_to(Dwarf(name="Happy"))
	assert dwarf.name == "Happy"
	assert dwarf.age == 10


def test_project_to_with_prefix_and_first_upper():
	opts = BasicOptionMap(property_first_upper=True)
	opts.add("doc.Name", "Doc")
	opts.add("happy.Name", "Happy")
	assert opts.project_to(Dwarf(), "doc.").name == "Doc"
	assert opts.project_to(Dwarf(), "happy.").name == "Happy"


def test_populate_from_stores_bean_fields():
	opts = BasicOptionMap()
	opts.add("fortune", "stale")
	opts.populate_from(Dwarf(name="Doc", age=63, fortune=[1, 2], color=Color.RED), "")
	assert opts.get("name") == "Doc"
	assert opts.get("age") == "63"
	assert opts.get_all("fortune") == ["1", "2"]
	assert opts.get("color") == "RED"
	assert "weight" not in opts


def test_two_prefixes_share_one_store_without_collisions():
	opts = BasicOptionMap()
	opts.populate_from(Dwarf(name="Doc"), "doc.")
	opts.populate_from(Dwarf(name="Happy"), "happy.")
	assert opts.get("doc.name") == "Doc"
	assert opts.get("happy.name") == "Happy"
	assert opts.project_to(Dwarf(), "doc.").name == "Doc"


def test_as_interface_reads_and_writes_through():
	opts = BasicOptionMap()
	opts.add("host", "example.org")
	opts.add("tags", "a")
	opts.add("tags", "b")
	server = opts.as_interface(Server)

	assert isinstance(server, Server)
	assert server.host == "example.org"
	assert server.port == 80
	assert server.tags == ["a", "b"]
	assert server.url() == "http://example.org:80"

	server.port = 8080
	assert opts.get("port") == "8080"
	server.tags = ["x"]
	assert opts.get_all("tags") == ["x"]
	del server.host
	assert "host" not in opts
	assert server.host is None


def test_as_interface_with_prefix_and_dataclass_defaults():
	opts = BasicOptionMap(property_first_upper=True)
	dwarf = opts.as_interface(Dwarf, "doc.")
	assert dwarf.fortune == []
	dwarf.age = 63
	dwarf.color = Color.RED
	assert opts.get("doc.Age") == "63"
	assert opts.get("doc.Color") == "RED"
	assert dwarf.age == 63
	assert dwarf.color is Color.RED
	dwarf.age = None
	assert "doc.Age" not in opts


def test_parse_failure_surfaces_as_binding_error():
	opts = BasicOptionMap()
	opts.add("age", "old")
	with pytest.raises(BindingError):
		opts.project_to(Dwarf())
	with pytest.raises(BindingError):
		opts.as_interface(Dwarf).age


def test_read_only_bean_surfaces_as_binding_error():
	opts = BasicOptionMap()
	opts.add("value", "5")
	with pytest.raises(BindingError):
		opts.project_to(Frozen())
	assert opts.as_interface(Frozen).value == 5


def test_default_access_is_cached_and_prefixed_ones_are_not():
	opts = BasicOptionMap()
	assert opts.default_access() is opts.default_access()
	assert opts.new_access("p.") is not opts.new_access("p.")


def test_concurrent_first_use_creates_one_default_access(monkeypatch):
	opts = BasicOptionMap()
	created = []
	original = BasicOptionMap.new_access
	barrier = threading.Barrier(8)

	def counting_new_access(self, prefix=None):
		created.append(prefix)
		return original(self, prefix)

	monkeypatch.setattr(BasicOptionMap, "new_access", counting_new_access)
	seen = []

	def worker():
		barrier.wait()
		seen.append(opts.default_access())

	threads = [threading.Thread(target=worker) for _ in range(8)]
	for t in threads:
		t.start()
	for t in threads:
		t.join()

	assert len(created) == 1
	assert len({id(a) for a in seen}) == 1
