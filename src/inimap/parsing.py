# src/inimap/parsing.py

"""
String <-> typed value conversion used by the typed accessors and bean binding.

Supported targets out of the box: ``str``, ``bool``, ``int``, ``float``,
``complex``, ``Decimal``, ``Fraction``, ``Path``/``PurePath``, ``datetime``,
``date``, ``time``, ``UUID``, ``bytes`` and any :class:`enum.Enum`.
``Optional[X]`` and ``X | None`` unwrap to ``X``. Other classes are
constructed from the text (``cls(text)``), so a type with a single-string
constructor works without registration; anything else can be taught with
:func:`register_parser`.
"""

from __future__ import annotations

import datetime as dt
import enum
import logging
import threading
import types
import uuid
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from pathlib import Path, PurePath
from typing import Any, Callable, Dict, Optional, Tuple, Union, get_args, get_origin

from .errors import BindingError

LOG = logging.getLogger(__name__)

Parser = Callable[[str], Any]

TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
FALSE_WORDS = frozenset({"false", "no", "off", "0"})

# containers are bound element-wise by the bean engine, never parsed from one string
_NOT_PARSEABLE: Tuple[type, ...] = (list, tuple, set, frozenset, dict)


def parse_bool(text: str) -> bool:
	"""
	Parse a boolean word (case-insensitive).

	``true/yes/on/1`` → ``True``; ``false/no/off/0`` → ``False``.

	:raises ValueError: For any other text.
	"""
	lower = text.strip().lower()
	if lower in TRUE_WORDS:
		return True
	if lower in FALSE_WORDS:
		return False
	raise ValueError(f"not a boolean: {text!r}")


_LOCK = threading.Lock()
_PARSERS: Dict[type, Parser] = {
	str: str,
	bool: parse_bool,
	int: lambda s: int(s.strip()),
	float: lambda s: float(s.strip()),
	complex: lambda s: complex(s.strip()),
	Decimal: lambda s: Decimal(s.strip()),
	Fraction: lambda s: Fraction(s.strip()),
	Path: Path,
	PurePath: PurePath,
	dt.datetime: lambda s: dt.datetime.fromisoformat(s.strip()),
	dt.date: lambda s: dt.date.fromisoformat(s.strip()),
	dt.time: lambda s: dt.time.fromisoformat(s.strip()),
	uuid.UUID: lambda s: uuid.UUID(s.strip()),
	bytes: lambda s: s.encode("utf-8"),
}


def register_parser(target: type, parser: Parser) -> Optional[Parser]:
	"""
	Register (or replace) the parser used for *target* and its subclasses.

	:param target: Destination type.
	:param parser: Callable taking the raw text and returning a *target* instance.
	:return: The parser previously registered for exactly *target*, if any.
	"""
	if not callable(parser):
		raise TypeError("parser must be callable")
	with _LOCK:
		old = _PARSERS.get(target)
		_PARSERS[target] = parser
	return old


def unregister_parser(target: type) -> Optional[Parser]:
	"""Forget the parser registered for exactly *target*."""
	with _LOCK:
		return _PARSERS.pop(target, None)


def _lookup(target: type) -> Optional[Parser]:
	with _LOCK:
		if target in _PARSERS:
			return _PARSERS[target]
		for base in getattr(target, "__mro__", ())[1:]:
			if base is not object and base in _PARSERS:
				return _PARSERS[base]
	return None


def _is_union(target: Any) -> bool:
	origin = get_origin(target)
	return origin is Union or origin is types.UnionType


def unwrap_optional(target: Any) -> Any:
	"""``Optional[X]`` → ``X``; other annotations are returned unchanged."""
	if _is_union(target):
		args = [a for a in get_args(target) if a is not type(None)]
		if len(args) == 1:
			return args[0]
	return target


def _parse_enum(text: str, target: type[enum.Enum]) -> enum.Enum:
	name = text.strip()
	try:
		return target[name]
	except KeyError:
		pass
	for member in target:
		if str(member.value) == name:
			return member
	raise ValueError(f"{name!r} is not a member of {target.__name__}")


def parse(raw: Optional[str], target: Any) -> Any:
	"""
	Convert *raw* text into an instance of *target*.

	:param raw: Source text; ``None`` always yields ``None``.
	:param target: Destination type or annotation (``int``, ``Optional[Path]``, ...).
	:return: The converted value.
	:raises BindingError: For malformed text or unsupported target types.
	"""
	if raw is None:
		return None
	target = unwrap_optional(target)
	if target is Any or target is object:
		return raw

	if _is_union(target):
		errors = []
		for option in get_args(target):
			if option is type(None):
				continue
			try:
				return parse(raw, option)
			except BindingError as exc:
				errors.append(str(exc))
		raise BindingError(f"Cannot parse {raw!r} as any of {target}: {'; '.join(errors)}")

	if not isinstance(target, type) or issubclass(target, _NOT_PARSEABLE):
		raise BindingError(f"Unsupported target type: {target!r}")

	if issubclass(target, enum.Enum):
		parser: Parser = lambda s: _parse_enum(s, target)  # noqa: E731
	else:
		parser = _lookup(target) or target

	try:
		value = parser(raw)
	except BindingError:
		raise
	except (ValueError, TypeError, ArithmeticError, InvalidOperation) as exc:
		raise BindingError(f"Cannot parse {raw!r} as {target.__name__}: {exc}") from exc
	LOG.debug("Parsed %r as %s", raw, target.__name__)
	return value


def format_value(value: Any) -> Optional[str]:
	"""
	Text form of *value* as written into a store; the inverse of :func:`parse`.

	``None`` stays ``None``, booleans become ``true``/``false``, enum members
	their name, dates and times ISO 8601, bytes are decoded as UTF-8.
	"""
	if value is None or isinstance(value, str):
		return value
	if isinstance(value, bool):
		return "true" if value else "false"
	if isinstance(value, enum.Enum):
		return value.name
	if isinstance(value, (dt.date, dt.time)):
		return value.isoformat()
	if isinstance(value, (bytes, bytearray)):
		return bytes(value).decode("utf-8")
	return str(value)


__all__ = [
	"Parser",
	"TRUE_WORDS",
	"FALSE_WORDS",
	"parse_bool",
	"register_parser",
	"unregister_parser",
	"unwrap_optional",
	"parse",
	"format_value",
]
