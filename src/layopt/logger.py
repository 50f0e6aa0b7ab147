"""
Logging utilities for optimization runs.

This module provides a Logger class that can be instantiated, configured,
and passed to optimizers and observers. It supports:
- File and/or console output with timestamps
- Date-based log directory structure (logs/YYYY/MM/DD/)
- Callable interface, so it fits any `logger: Callable[[str], None]` argument
- Separator and header formatting for run summaries
"""

import os
import logging
from datetime import datetime
from typing import Optional


class Logger:
	"""
	Logger that writes timestamped lines to a run log file and the console.

	Usage:
		logger = Logger("anneal_qwerty")
		logger.header("Simulated annealing")
		logger("Starting run...")

		# Optimizers take any Callable[[str], None]
		optimizer = GeneticOptimizer(..., logger=logger, verbose=True)

	Attributes:
		name: Logger name (used for the log filename)
		log_file: Path to the log file, or None when file output is disabled
	"""

	def __init__(
		self,
		name: str = "layopt",
		log_dir: Optional[str] = None,
		project_root: Optional[str] = None,
		console: bool = True,
		to_file: bool = True,
		timestamp_format: str = '%H:%M:%S',
	):
		"""
		Args:
			name: Base name for the log file (e.g., "genetic_run")
			log_dir: Override log directory (default: project_root/logs/YYYY/MM/DD/)
			project_root: Project root directory (default: two levels above the package)
			console: Whether to also log to console
			to_file: Whether to write a log file at all
			timestamp_format: strftime format for log timestamps
		"""
		self.name = name
		self.log_file: Optional[str] = None

		timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
		self._logger = logging.getLogger(f'layopt.{name}.{timestamp}')
		self._logger.setLevel(logging.INFO)
		self._logger.handlers.clear()
		self._logger.propagate = False

		formatter = logging.Formatter('%(asctime)s | %(message)s', datefmt=timestamp_format)

		if to_file:
			if log_dir is None:
				if project_root is None:
					# src/layopt/logger.py -> project root
					this_dir = os.path.dirname(os.path.abspath(__file__))
					project_root = os.path.dirname(os.path.dirname(this_dir))
				now = datetime.now()
				log_dir = os.path.join(
					project_root, "logs",
					now.strftime("%Y"),
					now.strftime("%m"),
					now.strftime("%d"),
				)
			os.makedirs(log_dir, exist_ok=True)
			self.log_file = os.path.join(log_dir, f"{name}_{timestamp}.log")

			file_handler = logging.FileHandler(self.log_file)
			file_handler.setFormatter(formatter)
			self._logger.addHandler(file_handler)

		if console:
			console_handler = logging.StreamHandler()
			console_handler.setFormatter(formatter)
			self._logger.addHandler(console_handler)

	def __call__(self, message: str = "") -> None:
		self.log(message)

	def log(self, message: str = "") -> None:
		"""Log a message to every configured handler and flush."""
		self._logger.info(message)
		for handler in self._logger.handlers:
			handler.flush()

	def separator(self, char: str = "=", width: int = 70) -> None:
		self.log(char * width)

	def header(self, title: str, char: str = "=", width: int = 70) -> None:
		"""Log a formatted header."""
		self.log()
		self.separator(char, width)
		self.log(f"  {title}")
		self.separator(char, width)

	def section(self, title: str, char: str = "-", width: int = 50) -> None:
		self.header(title, char=char, width=width)

	def close(self) -> None:
		"""Close and detach all handlers (releases the log file)."""
		for handler in list(self._logger.handlers):
			handler.close()
			self._logger.removeHandler(handler)

	def __repr__(self) -> str:
		return f"Logger(name='{self.name}', log_file='{self.log_file}')"


def create_logger(
	name: str = "layopt",
	log_dir: Optional[str] = None,
	console: bool = True,
	to_file: bool = True,
) -> Logger:
	"""
	Factory function to create a Logger instance.

	Args:
		name: Base name for the log file
		log_dir: Override log directory
		console: Whether to also log to console
		to_file: Whether to write a log file

	Returns:
		Configured Logger instance
	"""
	return Logger(name=name, log_dir=log_dir, console=console, to_file=to_file)
