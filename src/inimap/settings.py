# src/inimap/settings.py

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from .errors import OptionMapError
from .parsing import parse_bool

LOG = logging.getLogger(__name__)

ENV_PREFIX = "INIMAP_"


@dataclass(frozen=True)
class Settings:
	"""
	Construction flags of a :class:`~inimap.optionmap.BasicOptionMap`.

	:param property_first_upper: Upper-case the first letter of bean property
	                             names when turning them into keys.
	:param detect_cycles: Report cyclic placeholder references with
	                      :class:`~inimap.errors.SubstitutionCycleError`.
	:param strict: Report placeholders left after resolution with
	               :class:`~inimap.errors.UnresolvedPlaceholderError`.
	:param legacy_names: Allow ``}`` inside placeholder names.
	"""
	property_first_upper: bool = False
	detect_cycles: bool = False
	strict: bool = False
	legacy_names: bool = False

	@classmethod
	def from_env(cls, prefix: str = ENV_PREFIX, environ: Optional[Mapping[str, str]] = None) -> "Settings":
		"""
		Read settings from environment variables.

		Each field is looked up as ``<prefix><FIELD_NAME>``
		(e.g. ``INIMAP_STRICT=yes``); unset variables keep the default.

		:param prefix: Variable name prefix.
		:param environ: Mapping to read instead of ``os.environ``.
		:raises OptionMapError: When a variable is not a boolean word.
		"""
		env = os.environ if environ is None else environ
		values = {}
		for f in fields(cls):
			var = prefix + f.name.upper()
			raw = env.get(var)
			if raw is None:
				continue
			try:
				values[f.name] = parse_bool(raw)
			except ValueError as exc:
				raise OptionMapError(f"Environment variable {var}: {exc}") from exc
			LOG.debug("Setting %s=%s from %s", f.name, values[f.name], var)
		return cls(**values)


__all__ = ["ENV_PREFIX", "Settings"]
