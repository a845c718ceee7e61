# src/inimap/multimap.py

"""
Ordered multi-valued map with optional per-key comments.

Each key holds a list of values; the mapping view (``store[key]``) exposes the
*last* value of every key, so a ``BasicMultiMap`` can be handed to code that
expects a plain ``dict[str, str]``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any, Dict, List, Optional

LOG = logging.getLogger(__name__)


class BasicMultiMap(MutableMapping[str, Optional[str]]):
	"""
	Insertion-ordered ``key -> [value, ...]`` store.

	Absent keys and indexes are never an error on the read side: :meth:`get`
	returns ``None`` and :meth:`length` returns ``0``.
	"""

	def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
		self._values: Dict[str, List[Optional[str]]] = {}
		self._comments: Dict[str, str] = {}
		if data is not None:
			self.update(data)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}({self._values!r})"

	# --- multi-value API ---
	def add(self, key: str, value: Any, index: Optional[int] = None) -> None:
		"""
		Append *value* to the sequence of *key*, or insert it at *index*.

		:raises IndexError: If *index* is past the end of the sequence.
		"""
		values = self._values.setdefault(key, [])
		if index is None:
			values.append(value)
			return
		if index < 0 or index > len(values):
			if not values:
				del self._values[key]
			raise IndexError(f"index {index} out of range for '{key}' ({len(values)} value(s))")
		values.insert(index, value)

	def put(self, key: str, value: Any, index: Optional[int] = None) -> Optional[str]:
		"""
		Replace the last value of *key* (or the one at *index*).

		A missing key is created with *value* as its only element.

		:return: The replaced value, ``None`` when the key was absent.
		:raises IndexError: If *index* does not exist.
		"""
		values = self._values.get(key)
		if values is None:
			if index not in (None, 0):
				raise IndexError(f"index {index} out of range for '{key}' (0 value(s))")
			self._values[key] = [value]
			return None
		if index is None:
			index = len(values) - 1
		elif index < 0 or index >= len(values):
			raise IndexError(f"index {index} out of range for '{key}' ({len(values)} value(s))")
		old = values[index]
		values[index] = value
		return old

	def get(self, key: str, index: Optional[int] = None) -> Optional[str]:  # type: ignore[override]
		"""Return the last value of *key* (or the one at *index*), ``None`` if absent."""
		values = self._values.get(key)
		if not values:
			return None
		if index is None:
			return values[-1]
		if index < 0 or index >= len(values):
			return None
		return values[index]

	def get_all(self, key: str) -> Optional[List[Optional[str]]]:
		"""Return a copy of every value stored for *key*, ``None`` if absent."""
		values = self._values.get(key)
		return None if values is None else list(values)

	def put_all(self, key: str, values: Iterable[Any]) -> Optional[List[Optional[str]]]:
		"""
		Replace the whole sequence of *key*. An empty iterable removes the key.

		:return: The previous sequence or ``None``.
		"""
		new = list(values)
		old = self._values.get(key)
		if new:
			self._values[key] = new
		elif old is not None:
			self.remove(key)
		return old

	def remove(self, key: str, index: Optional[int] = None) -> Optional[str]:
		"""
		Remove *key* entirely, or only its value at *index*.

		Removing the only remaining value drops the key (and its comment).

		:return: The last removed value (``None`` when nothing was removed).
		"""
		values = self._values.get(key)
		if values is None:
			return None
		if index is None:
			del self._values[key]
			self._comments.pop(key, None)
			return values[-1] if values else None
		if index < 0 or index >= len(values):
			return None
		old = values.pop(index)
		if not values:
			del self._values[key]
			self._comments.pop(key, None)
		return old

	def length(self, key: str) -> int:
		"""Number of values stored for *key* (0 if absent)."""
		return len(self._values.get(key, ()))

	# --- comments ---
	def get_comment(self, key: str) -> Optional[str]:
		return self._comments.get(key)

	def put_comment(self, key: str, comment: Optional[str]) -> Optional[str]:
		"""Attach *comment* to *key*; ``None`` removes it. Returns the old comment."""
		if comment is None:
			return self.remove_comment(key)
		old = self._comments.get(key)
		self._comments[key] = comment
		return old

	def remove_comment(self, key: str) -> Optional[str]:
		return self._comments.pop(key, None)

	# --- mapping protocol ---
	def __getitem__(self, key: str) -> Optional[str]:
		values = self._values.get(key)
		if not values:
			raise KeyError(key)
		return values[-1]

	def __setitem__(self, key: str, value: Any) -> None:
		self.put(key, value)

	def __delitem__(self, key: str) -> None:
		if key not in self._values:
			raise KeyError(key)
		self.remove(key)

	def __contains__(self, key: object) -> bool:
		return key in self._values

	def __iter__(self) -> Iterator[str]:
		return iter(self._values)

	def __len__(self) -> int:
		return len(self._values)

	def clear(self) -> None:
		self._values.clear()
		self._comments.clear()

	def update(self, other: Any = (), /, **kwargs: Any) -> None:  # type: ignore[override]
		"""
		Merge *other* into this map.

		When *other* is a :class:`BasicMultiMap`, whole sequences and comments
		are copied (replacing existing sequences); otherwise each value is
		:meth:`put` as usual.
		"""
		if isinstance(other, BasicMultiMap):
			for key in other:
				self.put_all(key, other._values[key])
				comment = other.get_comment(key)
				if comment is not None:
					self.put_comment(key, comment)
			LOG.debug("Merged %d key(s) from %r", len(other), type(other).__name__)
		else:
			items = other.items() if isinstance(other, Mapping) else other
			for key, value in items:
				self[key] = value
		for key, value in kwargs.items():
			self[key] = value

	def copy(self) -> "BasicMultiMap":
		"""Shallow copy that keeps every sequence and comment."""
		dup = BasicMultiMap()
		dup.update(self)
		return dup


__all__ = ["BasicMultiMap"]
