"""
Memoized evaluation results keyed by permutation.

Usage:
	cache = FitnessCache()
	result, was_cached = cache.get_or_compute(perm, lambda: evaluate(perm))

A cache can be handed to several consecutive runs that share the same
evaluator. The first run binds it to its permutation generator's signature;
a later run whose permutations map to different layouts is refused. It holds
no lock: runs that share one instance must not use it at the same time.
"""

from typing import Callable, Generic, Iterator, Optional, Sequence, TypeVar

from layopt.core.errors import ConfigError
from layopt.evaluation.results import EvaluationResult


R = TypeVar('R')


class FitnessCache(Generic[R]):
	"""
	Unbounded permutation -> result memo.

	Keys are the permutation values (as tuples), so equal permutations
	share one entry no matter which list or tuple object carried them.
	Entries are never replaced or evicted.
	"""

	def __init__(self):
		self._entries: dict[tuple[int, ...], R] = {}
		self._hits = 0
		self._misses = 0
		self._signature: Optional[tuple] = None

	def bind(self, signature: tuple) -> None:
		"""
		Tie the cache to one permutation -> layout mapping.

		Raises:
			ConfigError: if the cache is already bound to a different mapping
		"""
		if self._signature is None:
			self._signature = signature
		elif self._signature != signature:
			raise ConfigError(
				f"Cache holds results for base layout '{self._signature[0]}' with slots "
				f"'{''.join(self._signature[1])}'; it cannot be reused for '{signature[0]}' "
				f"with slots '{''.join(signature[1])}'"
			)

	@property
	def signature(self) -> Optional[tuple]:
		return self._signature

	def get_or_compute(self, permutation: Sequence[int], compute_fn: Callable[[], R]) -> tuple[R, bool]:
		"""
		Return the cached result for permutation, computing it on a miss.

		compute_fn is called at most once per distinct permutation. If it
		raises, nothing is stored and the exception propagates.

		Returns:
			(result, was_cached)
		"""
		key = tuple(permutation)
		if key in self._entries:
			self._hits += 1
			return self._entries[key], True
		result = compute_fn()
		self._entries[key] = result
		self._misses += 1
		return result, False

	def get(self, permutation: Sequence[int]) -> Optional[R]:
		return self._entries.get(tuple(permutation))

	def __contains__(self, permutation: Sequence[int]) -> bool:
		return tuple(permutation) in self._entries

	def __len__(self) -> int:
		return len(self._entries)

	def __iter__(self) -> Iterator[tuple[int, ...]]:
		return iter(self._entries)

	@property
	def hits(self) -> int:
		return self._hits

	@property
	def misses(self) -> int:
		return self._misses

	@property
	def hit_rate(self) -> float:
		total = self._hits + self._misses
		return self._hits / total if total else 0.0

	def __repr__(self) -> str:
		return f"FitnessCache(entries={len(self._entries)}, hits={self._hits}, misses={self._misses})"


# Cache type used by both optimizers
EvaluationCache = FitnessCache[EvaluationResult]
