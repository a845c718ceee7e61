# src/inimap/logutil.py

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal, Optional, Union

PathLike = Union[str, Path]

LevelName = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"]
LevelLike = Union[int, LevelName, str]

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def level_value(value: LevelLike, *, param_name: str = "level") -> int:
	"""
	Turn a level given as an int or a name (any case) into the numeric level.

	:raises ValueError: For names the logging module does not know.
	"""
	if isinstance(value, int):
		return value

	resolved = logging.getLevelName(str(value).upper())
	if isinstance(resolved, int):
		return resolved

	raise ValueError(f"Unknown logging level name for {param_name}: {value}")


def get_logger(name: str = "inimap") -> logging.Logger:
	"""
	Return the package logger (or a child of it).

	Unlike an application logger, a library logger gets no handler here:
	records go nowhere until :func:`configure_logging` (or the embedding
	application) attaches one. A ``NullHandler`` keeps the "no handlers
	could be found" warning away.

	:param name: Logger name; module loggers under ``inimap.`` propagate to it.
	:return: The logger.
	"""
	log = logging.getLogger(name)
	if not log.handlers:
		log.addHandler(logging.NullHandler())
	return log


def configure_logging(
		*,
		name: str = "inimap",
		level: LevelLike = "INFO",
		file_path: Optional[PathLike] = None,
		file_level: Optional[LevelLike] = None,
		mode: str = "a",
		rotate: bool = False,
		max_bytes: int = 1_000_000,
		backup_count: int = 3,
		formatter: Optional[logging.Formatter] = None,
		propagate: bool = False
) -> logging.Logger:
	"""
	Attach a console handler (and optionally a file handler) to the package logger.

	Calling it again reconfigures the existing handlers instead of stacking new ones.

	:param name: Logger name.
	:param level: Console level (int or level name).
	:param file_path: Optional log file; parent directories are created.
	:param file_level: File handler level, defaults to *level*.
	:param mode: File open mode, ``'a'`` or ``'w'``.
	:param rotate: Use a :class:`RotatingFileHandler` for the file.
	:param max_bytes: Rotation threshold.
	:param backup_count: Number of rotated files to keep.
	:param formatter: Custom formatter, default :data:`DEFAULT_FORMAT`.
	:param propagate: Whether records also reach the root logger.
	:return: The configured logger.
	"""
	console_value = level_value(level, param_name="level")
	file_value = level_value(file_level, param_name="file_level") if file_level is not None else console_value

	log = get_logger(name)
	log.setLevel(min(console_value, file_value))
	log.propagate = propagate
	fmt = formatter or logging.Formatter(DEFAULT_FORMAT)

	has_stream = False
	for handler in log.handlers:
		# FileHandler is a StreamHandler subclass too
		if type(handler) is logging.StreamHandler:
			handler.setLevel(console_value)
			handler.setFormatter(fmt)
			has_stream = True
	if not has_stream:
		stream_handler = logging.StreamHandler()
		stream_handler.setLevel(console_value)
		stream_handler.setFormatter(fmt)
		log.addHandler(stream_handler)

	if file_path:
		path = Path(file_path)
		path.parent.mkdir(parents=True, exist_ok=True)
		already = False
		for handler in log.handlers:
			if getattr(handler, "baseFilename", None) == os.path.abspath(path):
				handler.setLevel(file_value)
				handler.setFormatter(fmt)
				already = True
		if not already:
			file_handler: logging.Handler
			if rotate:
				file_handler = RotatingFileHandler(
					path,
					mode=mode,
					maxBytes=max_bytes,
					backupCount=backup_count,
					encoding="utf-8"
				)
			else:
				file_handler = logging.FileHandler(path, mode=mode, encoding="utf-8")
			file_handler.setLevel(file_value)
			file_handler.setFormatter(fmt)
			log.addHandler(file_handler)

	return log


__all__ = ["PathLike", "LevelLike", "DEFAULT_FORMAT", "level_value", "get_logger", "configure_logging"]
