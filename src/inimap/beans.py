# src/inimap/beans.py

"""
Reflective binding between structured objects ("beans") and a property store.

A bean is an instance of a dataclass or of any class with public, annotated
attributes. The engine never talks to a store directly: it goes through a
:class:`BeanAccess` object, which maps property names to store keys and
values to text. Three operations are offered:

* :func:`inject_into_bean` copies stored values onto a bean's attributes,
* :func:`inject_from_bean` copies a bean's attributes into the store,
* :func:`proxy` builds an object whose attributes read and write straight
  through to the store.

Attributes annotated as ``list[X]``, ``tuple[X, ...]``, ``Sequence[X]`` or
``set[X]`` are *indexed*: every stored value of the key becomes one element.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import functools
import logging
from typing import (
	Any,
	Callable,
	ClassVar,
	Optional,
	Protocol,
	Tuple,
	TypeVar,
	get_args,
	get_origin,
	get_type_hints,
	runtime_checkable,
)

from .errors import BindingError
from .parsing import format_value, parse, unwrap_optional

LOG = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()

_SEQUENCE_ORIGINS = {
	list: list,
	tuple: tuple,
	set: set,
	frozenset: frozenset,
	cabc.Sequence: list,
	cabc.MutableSequence: list,
	cabc.Set: frozenset,
	cabc.MutableSet: set,
	cabc.Iterable: list,
	cabc.Collection: list,
}


@runtime_checkable
class BeanAccess(Protocol):
	"""Capability a store exposes to the binding engine, keyed by property name."""

	def prop_get(self, name: str, index: Optional[int] = None) -> Optional[str]:
		...

	def prop_set(self, name: str, value: Optional[str], index: Optional[int] = None) -> Optional[str]:
		...

	def prop_add(self, name: str, value: Optional[str]) -> None:
		...

	def prop_del(self, name: str) -> Optional[str]:
		...

	def prop_length(self, name: str) -> int:
		...


@dataclasses.dataclass(frozen=True)
class BeanProperty:
	"""
	One bindable attribute of a bean class.

	:param name: Attribute name (before any key transformation).
	:param type: Declared type; for indexed properties the element type.
	:param container: ``None`` for scalar properties, else the collection type
	                  the elements are gathered into (``list``, ``tuple``, ...).
	"""
	name: str
	type: Any
	container: Optional[type] = None

	@property
	def indexed(self) -> bool:
		return self.container is not None


def _split_container(hint: Any) -> Tuple[Any, Optional[type]]:
	hint = unwrap_optional(hint)
	if hint in _SEQUENCE_ORIGINS:
		return str, _SEQUENCE_ORIGINS[hint]
	origin = get_origin(hint)
	if origin in _SEQUENCE_ORIGINS:
		args = [a for a in get_args(hint) if a is not Ellipsis]
		return (args[0] if args else str), _SEQUENCE_ORIGINS[origin]
	return hint, None


@functools.lru_cache(maxsize=None)
def bean_properties(cls: type) -> Tuple[BeanProperty, ...]:
	"""
	Bindable properties of *cls*, in declaration order.

	Dataclass fields are used when *cls* is a dataclass, otherwise every
	annotated class attribute. ``ClassVar`` annotations and names starting
	with an underscore are skipped.

	:raises BindingError: When the annotations cannot be evaluated.
	"""
	try:
		hints = get_type_hints(cls)
	except Exception as exc:
		raise BindingError(f"Cannot read the annotations of {cls.__qualname__}: {exc}") from exc

	if dataclasses.is_dataclass(cls):
		names = [f.name for f in dataclasses.fields(cls)]
	else:
		names = list(hints)

	props = []
	for name in names:
		if name.startswith("_") or name not in hints:
			continue
		hint = hints[name]
		if hint is ClassVar or get_origin(hint) is ClassVar:
			continue
		element, container = _split_container(hint)
		props.append(BeanProperty(name, element, container))
	return tuple(props)


def _read(access: BeanAccess, prop: BeanProperty, length: int) -> Any:
	if prop.container is None:
		return parse(access.prop_get(prop.name), prop.type)
	items = [parse(access.prop_get(prop.name, i), prop.type) for i in range(length)]
	return prop.container(items)


def _write(access: BeanAccess, prop: BeanProperty, value: Any) -> None:
	if value is None:
		access.prop_del(prop.name)
	elif prop.container is None or isinstance(value, (str, bytes)):
		access.prop_set(prop.name, format_value(value))
	else:
		access.prop_del(prop.name)
		for item in value:
			access.prop_add(prop.name, format_value(item))


def inject_into_bean(bean: Any, access: BeanAccess) -> Any:
	"""
	Set every attribute of *bean* that has at least one stored value.

	Attributes without a stored value keep their current value.

	:return: *bean*, for chaining.
	:raises BindingError: On parse failures or read-only attributes.
	"""
	for prop in bean_properties(type(bean)):
		length = access.prop_length(prop.name)
		if length == 0:
			continue
		value = _read(access, prop, length)
		try:
			setattr(bean, prop.name, value)
		except (AttributeError, TypeError) as exc:
			raise BindingError(f"Cannot set {type(bean).__qualname__}.{prop.name}: {exc}") from exc
		LOG.debug("Bound %s.%s", type(bean).__qualname__, prop.name)
	return bean


def inject_from_bean(access: BeanAccess, bean: Any) -> None:
	"""
	Store every non-``None`` attribute of *bean*.

	Scalar attributes replace the last stored value; indexed attributes replace
	the whole sequence.
	"""
	for prop in bean_properties(type(bean)):
		value = getattr(bean, prop.name, None)
		if value is None:
			continue
		_write(access, prop, value)
		LOG.debug("Stored %s.%s", type(bean).__qualname__, prop.name)


def _default_factory(cls: type, name: str) -> Optional[Callable[[], Any]]:
	"""Zero-argument callable producing the declared default of *name*, if any."""
	if dataclasses.is_dataclass(cls):
		for f in dataclasses.fields(cls):
			if f.name != name:
				continue
			if f.default is not dataclasses.MISSING:
				value = f.default
				return lambda: value
			if f.default_factory is not dataclasses.MISSING:
				return f.default_factory
			return None
	value = getattr(cls, name, _MISSING)
	# methods, properties and slot descriptors are not defaults
	if value is _MISSING or callable(value) or hasattr(value, "__get__"):
		return None
	return lambda: value


def _make_property(prop: BeanProperty, default: Optional[Callable[[], Any]]) -> property:
	def fget(self: Any) -> Any:
		access: BeanAccess = self._bean_access
		length = access.prop_length(prop.name)
		if length == 0:
			return None if default is None else default()
		return _read(access, prop, length)

	def fset(self: Any, value: Any) -> None:
		_write(self._bean_access, prop, value)

	def fdel(self: Any) -> None:
		self._bean_access.prop_del(prop.name)

	return property(fget, fset, fdel, doc=f"Store-backed property '{prop.name}'.")


def _proxy_init(self: Any, access: BeanAccess) -> None:
	object.__setattr__(self, "_bean_access", access)


def _proxy_repr(self: Any) -> str:
	cls = type(self).__mro__[1]
	fields = ", ".join(f"{p.name}={getattr(self, p.name)!r}" for p in bean_properties(cls))
	return f"{cls.__qualname__}({fields})"


@functools.lru_cache(maxsize=None)
def _proxy_class(cls: type) -> type:
	namespace: dict[str, Any] = {
		p.name: _make_property(p, _default_factory(cls, p.name)) for p in bean_properties(cls)
	}
	namespace.update({
		"__slots__": ("_bean_access",),
		"__init__": _proxy_init,
		"__module__": cls.__module__,
		"__qualname__": f"{cls.__qualname__}Proxy",
	})
	if cls.__repr__ is object.__repr__:
		namespace["__repr__"] = _proxy_repr
	return type(cls)(f"{cls.__name__}Proxy", (cls,), namespace)


def proxy(cls: type[T], access: BeanAccess) -> T:
	"""
	Create an instance of a dynamic subclass of *cls* backed by *access*.

	Reading an attribute parses the stored value (or returns the declared
	default when nothing is stored); assigning stores the formatted value;
	assigning ``None`` or ``del`` removes the key. Methods of *cls* keep working
	and see the store-backed attributes.

	:param cls: Dataclass or annotated class describing the properties.
	:param access: Capability the proxy reads and writes through.
	:raises BindingError: When *cls* cannot be introspected.
	"""
	if not isinstance(cls, type):
		raise BindingError(f"Expected a class, got {cls!r}")
	try:
		proxy_cls = _proxy_class(cls)
	except BindingError:
		raise
	except TypeError as exc:
		raise BindingError(f"Cannot create a proxy for {cls.__qualname__}: {exc}") from exc
	return proxy_cls(access)


__all__ = [
	"BeanAccess",
	"BeanProperty",
	"bean_properties",
	"inject_into_bean",
	"inject_from_bean",
	"proxy",
]
