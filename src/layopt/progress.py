"""
Progress and best-solution tracking for optimization algorithms.

BestTracker holds the all-time best (fitness, payload) pair of a run and only
ever moves to strictly better values. ProgressTracker builds on it to record
and log per-generation statistics in a standardized way.
"""

from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar


T = TypeVar('T')


class BestTracker(Generic[T]):
	"""
	All-time best record of a run.

	A population can regress from one generation to the next, so the best
	solution seen so far is kept here rather than derived from the current
	population. The record is replaced only by a strictly better fitness:
	ties keep the earliest-found solution.

	Usage:
		tracker = BestTracker()  # maximize: higher fitness is better
		tracker.offer(-12.5, (0, 1, 2))
		tracker.offer(-13.0, (1, 0, 2))  # ignored, worse
		fitness, permutation = tracker.best
	"""

	def __init__(self, minimize: bool = False):
		"""
		Args:
			minimize: If True, lower values are better (costs). The default
				treats values as fitness, where higher is better.
		"""
		self._minimize = minimize
		self._fitness: Optional[float] = None
		self._item: Optional[T] = None
		self._updates = 0

	def is_better(self, fitness: float) -> bool:
		"""True if fitness would replace the current record."""
		if self._fitness is None:
			return True
		if self._minimize:
			return fitness < self._fitness
		return fitness > self._fitness

	def offer(self, fitness: float, item: T) -> bool:
		"""
		Offer a candidate; keep it if it is strictly better than the record.

		Returns:
			True if the record was replaced
		"""
		if not self.is_better(fitness):
			return False
		self._fitness = fitness
		self._item = item
		self._updates += 1
		return True

	@property
	def has_best(self) -> bool:
		return self._fitness is not None

	@property
	def fitness(self) -> Optional[float]:
		return self._fitness

	@property
	def item(self) -> Optional[T]:
		return self._item

	@property
	def best(self) -> Optional[tuple[float, T]]:
		"""The held (fitness, item) pair, or None before the first offer."""
		if self._fitness is None:
			return None
		return self._fitness, self._item

	@property
	def updates(self) -> int:
		"""How many times the record was replaced."""
		return self._updates

	@property
	def minimize(self) -> bool:
		return self._minimize

	def __repr__(self) -> str:
		return f"BestTracker(fitness={self._fitness}, minimize={self._minimize})"


@dataclass
class ProgressStats:
	"""Statistics for a single generation."""
	generation: int
	best_global: float
	best_current: float
	avg_current: float
	worst_current: float
	improved: bool = False


class ProgressTracker:
	"""
	Tracks optimization progress and logs standardized metrics.

	Usage:
		tracker = ProgressTracker(logger=my_logger, minimize=False, prefix="[GA]")

		for gen in range(generations):
			fitness_values = [evaluate(g) for g in population]
			tracker.tick(fitness_values, generation=gen)

		summary = tracker.summary()

	The tracker logs lines like:
		[GA] [Gen 1/50] best=-10.49, current=-10.52, avg=-10.55 *
	"""

	def __init__(
		self,
		logger: Optional[Callable[[str], None]] = None,
		minimize: bool = True,
		prefix: str = "",
		total_generations: Optional[int] = None,
	):
		"""
		Args:
			logger: Callable that logs messages (e.g., Logger instance, print)
			minimize: If True, lower fitness is better (costs)
			prefix: Prefix for log messages (e.g., "[GA]")
			total_generations: Total expected generations (for progress display)
		"""
		self._log = logger or print
		self._minimize = minimize
		self._prefix = prefix + " " if prefix else ""
		self._total = total_generations
		self._best = BestTracker[int](minimize=minimize)
		self._history: List[ProgressStats] = []

	def tick(
		self,
		fitness_values: List[float],
		generation: Optional[int] = None,
		log: bool = True,
	) -> ProgressStats:
		"""
		Record one generation of fitness values.

		Args:
			fitness_values: Fitness values of the current population
			generation: Generation number (auto-incremented if None)
			log: Whether to log the line

		Returns:
			ProgressStats for this generation
		"""
		if not fitness_values:
			raise ValueError("fitness_values cannot be empty")

		gen = generation if generation is not None else len(self._history)

		if self._minimize:
			best_current = min(fitness_values)
			worst_current = max(fitness_values)
		else:
			best_current = max(fitness_values)
			worst_current = min(fitness_values)

		improved = self._best.offer(best_current, gen)

		stats = ProgressStats(
			generation=gen,
			best_global=self._best.fitness,
			best_current=best_current,
			avg_current=sum(fitness_values) / len(fitness_values),
			worst_current=worst_current,
			improved=improved,
		)
		self._history.append(stats)

		if log:
			self._log_tick(stats)

		return stats

	def _log_tick(self, stats: ProgressStats) -> None:
		gen_str = f"Gen {stats.generation}"
		if self._total:
			gen_str = f"Gen {stats.generation}/{self._total}"

		improved_str = " *" if stats.improved else ""

		self._log(
			f"{self._prefix}[{gen_str}] "
			f"best={stats.best_global:.4f}, "
			f"current={stats.best_current:.4f}, "
			f"avg={stats.avg_current:.4f}{improved_str}"
		)

	@property
	def best_global(self) -> Optional[float]:
		"""Best fitness value seen so far."""
		return self._best.fitness

	@property
	def best_generation(self) -> int:
		"""Generation where the best fitness was found."""
		return self._best.item if self._best.has_best else 0

	@property
	def history(self) -> List[ProgressStats]:
		return self._history.copy()

	@property
	def generations_run(self) -> int:
		return len(self._history)

	def summary(self) -> dict:
		"""Get summary statistics."""
		if not self._history:
			return {"generations": 0}

		first = self._history[0]
		last = self._history[-1]

		return {
			"generations": len(self._history),
			"initial_fitness": first.best_current,
			"final_fitness": last.best_global,
			"best_generation": self.best_generation,
			"improvements": sum(1 for s in self._history if s.improved),
		}

	def log_summary(self) -> None:
		"""Log a summary of the optimization run."""
		s = self.summary()
		if s["generations"] == 0:
			self._log(f"{self._prefix}No generations completed")
			return

		self._log(f"{self._prefix}Summary:")
		self._log(f"  Generations: {s['generations']}")
		self._log(f"  Initial: {s['initial_fitness']:.4f}")
		self._log(f"  Final: {s['final_fitness']:.4f}")
		self._log(f"  Best at generation: {s['best_generation']}")
		self._log(f"  Total improvements: {s['improvements']}")
