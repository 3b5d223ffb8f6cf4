"""Centralized logging configuration for daily-planner."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "daily_planner"


def setup_logging(
	level: Optional[str] = None,
	log_dir: Optional[Path] = None,
	name: str = ROOT_LOGGER,
) -> logging.Logger:
	"""
	Set up logging with console and file handlers.

	Args:
		level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env var or WARNING.
		log_dir: Directory for the rotating log file; console only when omitted
		name: Logger name

	Returns:
		Configured logger
	"""
	level = level or os.getenv("DAILY_PLANNER_LOG_LEVEL", "WARNING")
	log_level = getattr(logging, level.upper(), logging.WARNING)

	logger = logging.getLogger(name)
	logger.setLevel(logging.DEBUG if log_dir else log_level)

	# Avoid duplicate handlers
	if logger.handlers:
		return logger

	detailed_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
		datefmt="%Y-%m-%d %H:%M:%S",
	)
	simple_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(message)s",
		datefmt="%H:%M:%S",
	)

	console_handler = logging.StreamHandler(sys.stderr)
	console_handler.setLevel(log_level)
	console_handler.setFormatter(simple_formatter)
	logger.addHandler(console_handler)

	if log_dir:
		log_path = Path(log_dir)
		log_path.mkdir(parents=True, exist_ok=True)

		file_handler = RotatingFileHandler(
			log_path / f"{name}.log",
			maxBytes=5 * 1024 * 1024,  # 5 MB
			backupCount=3,
			encoding="utf-8",
		)
		file_handler.setLevel(logging.DEBUG)  # File gets all logs
		file_handler.setFormatter(detailed_formatter)
		logger.addHandler(file_handler)

	return logger
