# src/inimap/errors.py

from __future__ import annotations

from typing import Iterable, Sequence


class OptionMapError(Exception):
	"""Base class for every error raised by :mod:`inimap`."""


class BindingError(OptionMapError, ValueError):
	"""
	A stored text could not be converted to the requested type, or a bean
	could not be read or written.

	The original exception (if any) is available as ``__cause__``.
	"""


class SubstitutionError(OptionMapError):
	"""Base for the opt-in placeholder resolution failures."""


class SubstitutionCycleError(SubstitutionError):
	"""
	Raised when cycle detection is enabled and a placeholder refers back to a
	key that is already being expanded.

	:param chain: Keys in expansion order; the last one closes the cycle.
	"""
	def __init__(self, chain: Sequence[str]) -> None:
		self.chain = tuple(chain)
		super().__init__("Cyclic placeholder reference: " + " -> ".join(self.chain))


class UnresolvedPlaceholderError(SubstitutionError):
	"""
	Raised in strict mode when placeholders are left after resolution.

	:param key: Key whose value was being fetched.
	:param tokens: The placeholder tokens that could not be substituted.
	"""
	def __init__(self, key: str, tokens: Iterable[str]) -> None:
		self.key = key
		self.tokens = tuple(tokens)
		super().__init__(f"Unresolved placeholder(s) in '{key}': {', '.join(self.tokens)}")


__all__ = [
	"OptionMapError",
	"BindingError",
	"SubstitutionError",
	"SubstitutionCycleError",
	"UnresolvedPlaceholderError",
]
