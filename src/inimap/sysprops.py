# src/inimap/sysprops.py

"""
Process-wide system properties, the source behind ``${@prop/name}`` placeholders.

The registry starts with a handful of well-known entries describing the running
process (``user.home``, ``os.name``, ``python.version``, ...) and can be
extended by the application at any time. All access goes through a module lock.
"""

from __future__ import annotations

import getpass
import logging
import os
import platform
import threading
from pathlib import Path
from typing import Dict, Optional

LOG = logging.getLogger(__name__)

_LOCK = threading.Lock()


def _user_name() -> str:
	try:
		return getpass.getuser()
	except (KeyError, OSError):
		# no passwd entry and no USER/LOGNAME in the environment
		return ""


def _defaults() -> Dict[str, str]:
	return {
		"user.home": str(Path.home()),
		"user.name": _user_name(),
		"user.dir": os.getcwd(),
		"os.name": platform.system(),
		"os.arch": platform.machine(),
		"os.version": platform.release(),
		"python.version": platform.python_version(),
		"file.separator": os.sep,
		"path.separator": os.pathsep,
		"line.separator": os.linesep,
	}


_PROPERTIES: Dict[str, str] = _defaults()


def get_property(name: str, default: Optional[str] = None) -> Optional[str]:
	"""Return the system property *name*, or *default* when it is not set."""
	with _LOCK:
		return _PROPERTIES.get(name, default)


def set_property(name: str, value: object) -> Optional[str]:
	"""
	Set a system property. Non-string values are stored as ``str(value)``.

	:return: The previous value, ``None`` if it was not set.
	:raises ValueError: If *name* is empty.
	"""
	if not name:
		raise ValueError("System property name must not be empty")
	text = value if isinstance(value, str) else str(value)
	with _LOCK:
		old = _PROPERTIES.get(name)
		_PROPERTIES[name] = text
	LOG.debug("System property %s set", name)
	return old


def clear_property(name: str) -> Optional[str]:
	"""Remove a system property and return its previous value."""
	with _LOCK:
		return _PROPERTIES.pop(name, None)


def properties() -> Dict[str, str]:
	"""Snapshot of every system property."""
	with _LOCK:
		return dict(_PROPERTIES)


def reset() -> None:
	"""Drop application-defined properties and restore the process defaults."""
	with _LOCK:
		_PROPERTIES.clear()
		_PROPERTIES.update(_defaults())


__all__ = ["get_property", "set_property", "clear_property", "properties", "reset"]
