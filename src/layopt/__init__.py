"""layopt - keyboard layout optimization."""

from layopt.logger import Logger, create_logger
from layopt.progress import ProgressTracker, ProgressStats, BestTracker

__all__ = [
	'Logger', 'create_logger',
	'ProgressTracker', 'ProgressStats', 'BestTracker',
]
