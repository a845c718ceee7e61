"""
inimap: ordered multi-valued option store with ``${...}`` substitution,
typed access and binding to dataclasses and annotated classes.

Top-level API keeps imports lazy:

    from inimap import BasicOptionMap
    opts = BasicOptionMap(property_first_upper=True)
    opts.add("Name", "demo")
    opts.fetch("Name")

    from inimap import sysprops
    sysprops.set_property("app.home", "/opt/demo")

    from inimap import configure_logging
    configure_logging(level="DEBUG")
"""

from importlib import import_module
from importlib.metadata import version, PackageNotFoundError as _PNF
from typing import TYPE_CHECKING

try:
	__version__ = version("inimap")
except _PNF:
	__version__ = "0.0.0+local"

__all__ = [
	"__version__",
	# main facades
	"BasicOptionMap", "BasicMultiMap", "Settings",
	"configure_logging", "get_logger",
	# errors
	"OptionMapError", "BindingError", "SubstitutionError",
	"SubstitutionCycleError", "UnresolvedPlaceholderError",
	# binding and parsing
	"BeanAccess", "parse", "format_value", "register_parser",
	# namespaces
	"beans", "errors", "logutil", "multimap", "optionmap", "parsing", "settings", "sysprops",
]

# --- lazy maps ---------------------------------------------------------------
_EXPORTS = {
	"BasicOptionMap": "inimap.optionmap",
	"BasicMultiMap": "inimap.multimap",
	"Settings": "inimap.settings",
	"configure_logging": "inimap.logutil",
	"get_logger": "inimap.logutil",
	"OptionMapError": "inimap.errors",
	"BindingError": "inimap.errors",
	"SubstitutionError": "inimap.errors",
	"SubstitutionCycleError": "inimap.errors",
	"UnresolvedPlaceholderError": "inimap.errors",
	"BeanAccess": "inimap.beans",
	"parse": "inimap.parsing",
	"format_value": "inimap.parsing",
	"register_parser": "inimap.parsing",
}

_NAMESPACES = {"beans", "errors", "logutil", "multimap", "optionmap", "parsing", "settings", "sysprops"}


def __getattr__(name: str):
	if name in _EXPORTS:
		return getattr(import_module(_EXPORTS[name]), name)
	if name in _NAMESPACES:
		return import_module(f"inimap.{name}")
	raise AttributeError(f"module 'inimap' has no attribute {name!r}")


# Help type-checkers without eager imports
if TYPE_CHECKING:
	from . import beans, errors, logutil, multimap, optionmap, parsing, settings, sysprops  # noqa: F401
	from .beans import BeanAccess  # noqa: F401
	from .errors import (  # noqa: F401
		OptionMapError, BindingError, SubstitutionError,
		SubstitutionCycleError, UnresolvedPlaceholderError,
	)
	from .logutil import configure_logging, get_logger  # noqa: F401
	from .multimap import BasicMultiMap  # noqa: F401
	from .optionmap import BasicOptionMap  # noqa: F401
	from .parsing import parse, format_value, register_parser  # noqa: F401
	from .settings import Settings  # noqa: F401
