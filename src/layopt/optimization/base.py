"""
Base class for layout optimization strategies.

Holds what the genetic and the annealing optimizer share: the permutation
layout generator built from the starting layout, a seeded random number
generator, the evaluation path through the fitness cache, and logging.
"""

import random
from abc import ABC, abstractmethod
from typing import Callable, Optional

from layopt.evaluation.evaluator import EvaluationContract
from layopt.evaluation.results import EvaluationResult, LayoutEvaluation
from layopt.layout.layout import KeyboardLayoutGenerator, Layout
from layopt.optimization.cache import FitnessCache
from layopt.optimization.permutation import Permutation, PermutationLayoutGenerator


class OptimizerStrategyBase(ABC):
	"""
	Abstract base class for layout optimization strategies.

	Subclasses implement the search itself and the name property.

	The starting layout text fixes the slot order and the position of every
	fixed character. The starting permutation is either that layout
	(start_with_layout=True) or a random permutation.
	"""

	def __init__(
		self,
		layout_str: str,
		fixed_characters: str,
		layout_generator: KeyboardLayoutGenerator,
		evaluator: EvaluationContract,
		cache: Optional[FitnessCache] = None,
		seed: Optional[int] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		"""
		Args:
			layout_str: Starting layout text
			fixed_characters: Characters that keep their key
			layout_generator: Generator that materializes layouts
			evaluator: Evaluation contract (lower total cost is better)
			cache: Fitness cache to reuse across runs (default: a fresh one)
			seed: Random seed for reproducibility (None = nondeterministic)
			verbose: Log progress messages
			logger: Logging function (default: print)

		Raises:
			ConfigError: if the starting layout and fixed characters do not fit,
				or the cache was filled for a different base layout or keyboard
		"""
		self._permutation_generator = PermutationLayoutGenerator(layout_str, fixed_characters, layout_generator)
		self._evaluator = evaluator
		self._cache = cache if cache is not None else FitnessCache()
		self._cache.bind(self._permutation_generator.signature)
		self._seed = seed
		self._rng = random.Random(seed)
		self._verbose = verbose
		self._logger = logger or print

	def _log(self, msg: str) -> None:
		"""Log a message using the configured logger."""
		if self._verbose:
			self._logger(msg)

	@property
	@abstractmethod
	def name(self) -> str:
		"""Return the strategy name."""
		...

	@property
	def seed(self) -> Optional[int]:
		return self._seed

	@property
	def verbose(self) -> bool:
		return self._verbose

	@property
	def cache(self) -> FitnessCache:
		return self._cache

	@property
	def permutation_generator(self) -> PermutationLayoutGenerator:
		return self._permutation_generator

	def _starting_permutation(self, start_with_layout: bool) -> Permutation:
		if start_with_layout:
			return self._permutation_generator.identity()
		return self._permutation_generator.random_permutation(self._rng)

	def _evaluate(self, permutation: Permutation) -> EvaluationResult:
		"""Evaluation result for a permutation, from the cache when possible."""
		result, _ = self._cache.get_or_compute(
			permutation,
			lambda: self._evaluator.evaluate_layout(self._permutation_generator.generate_layout(permutation)),
		)
		return result

	def _layout_evaluation(self, permutation: Permutation) -> LayoutEvaluation:
		layout = self._permutation_generator.generate_layout(permutation)
		return LayoutEvaluation.from_result(self._evaluate(permutation), layout)

	def layout_for(self, permutation: Permutation) -> Layout:
		return self._permutation_generator.generate_layout(permutation)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(seed={self._seed}, verbose={self._verbose})"
