# src/inimap/optionmap.py

"""
Option store with ``${...}`` substitution, typed access and bean binding.

    opts = BasicOptionMap()
    opts.add("home", "/opt/app")
    opts.add("logs", "${home}/logs")
    opts.fetch("logs")                  # '/opt/app/logs'
    opts.add("port", 8080)
    opts.fetch_as("port", int)          # 8080

Placeholder syntax:

* ``${name}``: last value of another key, itself resolved;
* ``${name[2]}``: value at index 2 of another key;
* ``${@env/NAME}``: environment variable;
* ``${@prop/name}``: system property (see :mod:`inimap.sysprops`);
* ``\\${name}``: escaped, left untouched (the backslash is kept as well).

A placeholder whose target does not exist stays in the text as is.
"""

from __future__ import annotations

import logging
import os
import re
import threading
from typing import Any, Iterable, List, Optional, Tuple, Type, TypeVar

from . import beans, parsing, sysprops
from .errors import SubstitutionCycleError, UnresolvedPlaceholderError
from .multimap import BasicMultiMap
from .settings import Settings

LOG = logging.getLogger(__name__)

T = TypeVar("T")

SUBST_CHAR = "$"
ENVIRONMENT_PREFIX = "@env/"
SYSTEM_PROPERTY_PREFIX = "@prop/"

EXPRESSION = re.compile(r"(?<!\\)\$\{(?P<option>[^\[\}]+)(\[(?P<index>[0-9]+)\])?\}")
# names may contain '}', so '${a}${b}' is one token named 'a}${b'
LEGACY_EXPRESSION = re.compile(r"(?<!\\)\$\{(?P<option>[^\[]+)(\[(?P<index>[0-9]+)\])?\}")


def find_placeholders(text: str, expression: re.Pattern = EXPRESSION) -> Tuple[str, ...]:
	"""Unescaped placeholder tokens found in *text*, in order."""
	return tuple(m.group(0) for m in expression.finditer(text))


class BasicOptionMap(BasicMultiMap):
	"""
	Multi-valued ``str -> str`` store whose read side resolves placeholders.

	Writes (:meth:`add`, :meth:`put`, :meth:`put_all`) store text as given,
	converting non-string values with :func:`inimap.parsing.format_value`
	(``True`` is stored as ``"true"``), the form :meth:`populate_from` writes.
	Raw reads (:meth:`get`, :meth:`get_as`) return the stored text; resolved
	reads (:meth:`fetch`, :meth:`fetch_as`) substitute placeholders first.

	:param property_first_upper: Bean property ``age`` maps to key ``Age``.
	:param detect_cycles: Raise :class:`SubstitutionCycleError` on cyclic
	                      references, including ones that pass through
	                      ``@env/`` or ``@prop/`` values. Without it a cycle
	                      between keys ends in :class:`RecursionError`, and a
	                      variable or property whose value names itself loops
	                      forever.
	:param strict: Raise :class:`UnresolvedPlaceholderError` when a fetched
	               value still holds placeholders after resolution.
	:param legacy_names: Let placeholder names contain ``}``, as older
	                     releases of the format did. ``${a}${b}`` is then a
	                     single unresolvable token instead of two references.
	"""

	def __init__(
			self,
			property_first_upper: bool = False,
			*,
			detect_cycles: bool = False,
			strict: bool = False,
			legacy_names: bool = False,
			data: Optional[Any] = None
	) -> None:
		self._property_first_upper = property_first_upper
		self._detect_cycles = detect_cycles
		self._strict = strict
		self._legacy_names = legacy_names
		self._expression = LEGACY_EXPRESSION if legacy_names else EXPRESSION
		self._default_access: Optional[BasicOptionMap.Access] = None
		self._access_lock = threading.Lock()
		self._resolving = threading.local()
		super().__init__(data)

	@classmethod
	def from_settings(cls, settings: Settings, data: Optional[Any] = None) -> "BasicOptionMap":
		"""Build a store configured by *settings*."""
		return cls(
			settings.property_first_upper,
			detect_cycles=settings.detect_cycles,
			strict=settings.strict,
			legacy_names=settings.legacy_names,
			data=data
		)

	@property
	def property_first_upper(self) -> bool:
		return self._property_first_upper

	@property
	def settings(self) -> Settings:
		return Settings(
			property_first_upper=self._property_first_upper,
			detect_cycles=self._detect_cycles,
			strict=self._strict,
			legacy_names=self._legacy_names
		)

	def copy(self) -> "BasicOptionMap":
		dup = self.from_settings(self.settings)
		dup.update(self)
		return dup

	# --- writes ---
	def add(self, key: str, value: Any, index: Optional[int] = None) -> None:
		super().add(key, parsing.format_value(value), index)

	def put(self, key: str, value: Any, index: Optional[int] = None) -> Optional[str]:
		return super().put(key, parsing.format_value(value), index)

	def put_all(self, key: str, values: Iterable[Any]) -> Optional[List[Optional[str]]]:
		return super().put_all(key, [parsing.format_value(v) for v in values])

	# --- resolved reads ---
	def fetch(self, key: str, index: Optional[int] = None, *, default: Optional[str] = None) -> Optional[str]:
		"""
		Value of *key* (last one, or the one at *index*) with placeholders resolved.

		:param default: Returned when the key or index is absent.
		"""
		value = self.get(key, index)
		if value is None:
			return default
		if SUBST_CHAR not in value:
			return value

		if not self._detect_cycles:
			resolved = self.resolve(value)
		else:
			resolved = self._resolve_tracked(key if index is None else f"{key}[{index}]", value)

		if self._strict:
			leftover = find_placeholders(resolved, self._expression)
			if leftover:
				raise UnresolvedPlaceholderError(key, leftover)
		return resolved

	def fetch_as(self, key: str, as_type: Type[T], index: Optional[int] = None, *, default: Optional[T] = None) -> Optional[T]:
		"""
		Resolved value of *key* parsed into *as_type*.

		:raises BindingError: When the text cannot be parsed.
		"""
		value = parsing.parse(self.fetch(key, index), as_type)
		return default if value is None else value

	def fetch_all(self, key: str, as_type: Any = str) -> Optional[List[Any]]:
		"""Every value of *key*, resolved and parsed; ``None`` if the key is absent."""
		length = self.length(key)
		if length == 0:
			return None
		return [parsing.parse(self.fetch(key, i), as_type) for i in range(length)]

	# --- raw typed reads ---
	def get_as(self, key: str, as_type: Type[T], index: Optional[int] = None, *, default: Optional[T] = None) -> Optional[T]:
		"""Raw (unresolved) value of *key* parsed into *as_type*."""
		value = parsing.parse(self.get(key, index), as_type)
		return default if value is None else value

	def get_all_as(self, key: str, as_type: Any) -> Optional[List[Any]]:
		"""Every raw value of *key* parsed into *as_type*; ``None`` if the key is absent."""
		values = self.get_all(key)
		if values is None:
			return None
		return [parsing.parse(v, as_type) for v in values]

	# --- substitution ---
	def _resolve_tracked(self, ref: str, text: str) -> str:
		"""Resolve *text*, the value behind *ref*, with *ref* on this thread's chain."""
		chain: List[str] = getattr(self._resolving, "chain", None) or []
		if ref in chain:
			raise SubstitutionCycleError([*chain[chain.index(ref):], ref])
		self._resolving.chain = [*chain, ref]
		try:
			return self.resolve(text)
		finally:
			self._resolving.chain = chain

	def _lookup(self, name: str, index: Optional[int]) -> Optional[str]:
		if name.startswith(ENVIRONMENT_PREFIX):
			value = os.environ.get(name[len(ENVIRONMENT_PREFIX):])
		elif name.startswith(SYSTEM_PROPERTY_PREFIX):
			value = sysprops.get_property(name[len(SYSTEM_PROPERTY_PREFIX):])
		else:
			return self.fetch(name, index)
		# expanded before splicing so a value naming itself is caught
		if self._detect_cycles and value is not None and SUBST_CHAR in value:
			value = self._resolve_tracked(name, value)
		return value

	def resolve(self, text: str) -> str:
		"""
		Substitute every resolvable placeholder in *text* and return the result.

		After each replacement the scan restarts from the beginning, so a
		replacement that itself contains placeholders is expanded too.
		Unresolvable placeholders are skipped and left in place.
		"""
		pos = 0
		while True:
			match = self._expression.search(text, pos)
			if match is None:
				return text
			name = match.group("option")
			index = match.group("index")
			value = self._lookup(name, None if index is None else int(index))
			if value is None:
				LOG.debug("Unresolved placeholder %s", match.group(0))
				pos = match.end()
				continue
			LOG.debug("Substituted %s", match.group(0))
			text = text[:match.start()] + value + text[match.end():]
			pos = 0

	# --- bean binding ---
	def as_interface(self, cls: Type[T], prefix: Optional[str] = None) -> T:
		"""
		Object of type *cls* whose annotated attributes live in this store.

		:param prefix: Key prefix for the attributes; ``None`` uses the shared adapter.
		"""
		return beans.proxy(cls, self._access_for(prefix))

	def project_to(self, bean: T, prefix: Optional[str] = None) -> T:
		"""
		Copy stored values onto the attributes of *bean*.

		:return: *bean*.
		:raises BindingError: On parse failures.
		"""
		return beans.inject_into_bean(bean, self._access_for(prefix))

	def populate_from(self, bean: Any, prefix: Optional[str] = None) -> None:
		"""Store every non-``None`` attribute of *bean*."""
		beans.inject_from_bean(self._access_for(prefix), bean)

	def default_access(self) -> "BasicOptionMap.Access":
		"""Shared, unprefixed adapter, created on first use."""
		if self._default_access is None:
			with self._access_lock:
				if self._default_access is None:
					self._default_access = self.new_access()
		return self._default_access

	def new_access(self, prefix: Optional[str] = None) -> "BasicOptionMap.Access":
		return self.Access(self, prefix)

	def _access_for(self, prefix: Optional[str]) -> "BasicOptionMap.Access":
		return self.default_access() if prefix is None else self.new_access(prefix)

	class Access:
		"""
		:class:`~inimap.beans.BeanAccess` view of a store.

		Property names become keys by prepending the prefix and, when the
		store was created with ``property_first_upper``, upper-casing the
		first letter: prefix ``app.`` turns ``age`` into ``app.Age``.
		"""

		def __init__(self, store: "BasicOptionMap", prefix: Optional[str] = None) -> None:
			self.store = store
			self.prefix = prefix

		def __repr__(self) -> str:
			return f"{self.__class__.__qualname__}(prefix={self.prefix!r}, first_upper={self.store.property_first_upper})"

		def transform(self, name: Optional[str]) -> Optional[str]:
			first_upper = self.store.property_first_upper
			if name is None or (self.prefix is None and not first_upper):
				return name
			if first_upper:
				name = name[:1].upper() + name[1:]
			return (self.prefix or "") + name

		def prop_get(self, name: str, index: Optional[int] = None) -> Optional[str]:
			return self.store.fetch(self.transform(name), index)

		def prop_set(self, name: str, value: Optional[str], index: Optional[int] = None) -> Optional[str]:
			return self.store.put(self.transform(name), value, index)

		def prop_add(self, name: str, value: Optional[str]) -> None:
			self.store.add(self.transform(name), value)

		def prop_del(self, name: str) -> Optional[str]:
			return self.store.remove(self.transform(name))

		def prop_length(self, name: str) -> int:
			return self.store.length(self.transform(name))


__all__ = [
	"BasicOptionMap",
	"EXPRESSION",
	"LEGACY_EXPRESSION",
	"ENVIRONMENT_PREFIX",
	"SYSTEM_PROPERTY_PREFIX",
	"find_placeholders",
]
