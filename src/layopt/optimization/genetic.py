"""
Genetic Algorithm optimizer, driven one generation at a time.

The optimizer has no internal loop. Each step() call produces exactly one
generation and returns, so a caller can interleave the search with other
work (a UI event loop, a scheduler) and stop at any generation boundary by
simply not calling step() again:

	optimizer = GeneticOptimizer(params, evaluator, layout_str, generator, fixed_characters=",.")
	while True:
		outcome = optimizer.step()
		if outcome.kind == StepKind.INTERMEDIATE:
			show(outcome.best.evaluation)
		else:
			break

Fitness here is the negated total cost, so higher is better. A population
can regress between generations; the all-time best lives in a BestTracker
outside the population and is what every outcome reports.
"""

from dataclasses import dataclass, replace
from typing import Callable, Optional

from layopt.core.config import YamlConfigMixin
from layopt.core.errors import AlreadyTerminatedError, ConfigError, InvalidPermutationError
from layopt.core.states import OptimizerState, StepKind, StopReason
from layopt.evaluation.evaluator import EvaluationContract
from layopt.evaluation.results import EvaluationResult, LayoutEvaluation
from layopt.layout.layout import KeyboardLayoutGenerator, Layout
from layopt.optimization.base import OptimizerStrategyBase
from layopt.optimization.cache import FitnessCache
from layopt.optimization.operators import OrderCrossover, SwapMutation, TournamentSelection
from layopt.optimization.permutation import Permutation
from layopt.progress import BestTracker, ProgressStats, ProgressTracker


@dataclass
class GeneticParameters(YamlConfigMixin):
	"""
	Configuration for the genetic optimizer.

	- population_size: individuals per generation
	- generation_limit: generations before the run is final
	- mutation_rate: per-slot swap probability
	- crossover_rate: probability that a child comes from crossover rather
	  than a copy of its first parent
	- tournament_size: candidates per selection tournament
	- elitism: best individuals copied unchanged into the next generation
	- stagnation_limit: generations without a new all-time best before the
	  run is final (None = only the generation limit applies)
	"""
	population_size: int = 50
	generation_limit: int = 100
	mutation_rate: float = 0.05
	crossover_rate: float = 0.7
	tournament_size: int = 3
	elitism: int = 2
	stagnation_limit: Optional[int] = None

	def validate(self) -> None:
		"""
		Raises:
			ConfigError: on any out-of-range value
		"""
		def is_int(value) -> bool:
			return isinstance(value, int) and not isinstance(value, bool)

		if not is_int(self.population_size) or self.population_size < 2:
			raise ConfigError(f"population_size must be an integer >= 2, got {self.population_size!r}")
		if not is_int(self.generation_limit) or self.generation_limit < 1:
			raise ConfigError(f"generation_limit must be an integer >= 1, got {self.generation_limit!r}")
		for name in ("mutation_rate", "crossover_rate"):
			value = getattr(self, name)
			if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
				raise ConfigError(f"{name} must be within [0, 1], got {value!r}")
		if not is_int(self.tournament_size) or self.tournament_size < 1:
			raise ConfigError(f"tournament_size must be an integer >= 1, got {self.tournament_size!r}")
		if not is_int(self.elitism) or not 0 <= self.elitism < self.population_size:
			raise ConfigError(f"elitism must be within [0, population_size), got {self.elitism!r}")
		if self.stagnation_limit is not None and (not is_int(self.stagnation_limit) or self.stagnation_limit < 1):
			raise ConfigError(f"stagnation_limit must be None or an integer >= 1, got {self.stagnation_limit!r}")


@dataclass(frozen=True)
class BestSolution:
	"""All-time best of a genetic run."""
	fitness: float
	permutation: Permutation
	evaluation: LayoutEvaluation


@dataclass(frozen=True)
class StepOutcome:
	"""
	Result of one step() call.

	- INTERMEDIATE: a generation was produced; the run can continue
	- FINAL: the stopping criteria were met (stop_reason says which)
	- FAILED: the generation could not be produced (reason says why)

	best is the all-time best so far in every kind of outcome (None only if
	a failure happened before anything was evaluated).
	"""
	kind: StepKind
	generation: int
	best: Optional[BestSolution] = None
	generation_best_fitness: Optional[float] = None
	stop_reason: Optional[StopReason] = None
	reason: Optional[str] = None

	@property
	def is_intermediate(self) -> bool:
		return self.kind == StepKind.INTERMEDIATE

	@property
	def is_final(self) -> bool:
		return self.kind == StepKind.FINAL

	@property
	def is_failed(self) -> bool:
		return self.kind == StepKind.FAILED


class GeneticOptimizer(OptimizerStrategyBase):
	"""
	Steppable genetic search over permutations of the movable characters.

	One generation:
	1. Keep the `elitism` fittest individuals with their known fitness
	2. Fill the population by tournament selection, order crossover and
	   swap mutation
	3. Evaluate new individuals through the fitness cache
	4. Offer the generation's best to the all-time best tracker

	The first step() evaluates the seed population, which counts as
	generation 1.
	"""

	def __init__(
		self,
		parameters: GeneticParameters,
		evaluator: EvaluationContract,
		layout_str: str,
		layout_generator: KeyboardLayoutGenerator,
		fixed_characters: str = "",
		start_with_layout: bool = False,
		cache: Optional[FitnessCache] = None,
		seed: Optional[int] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
		selection: Optional[TournamentSelection] = None,
		crossover: Optional[OrderCrossover] = None,
		mutation: Optional[SwapMutation] = None,
	):
		"""
		Args:
			parameters: Genetic parameters (validated here)
			evaluator: Evaluation contract
			layout_str: Starting layout text
			layout_generator: Generator that materializes layouts
			fixed_characters: Characters that keep their key
			start_with_layout: Seed one individual with the starting layout;
				all other individuals are random permutations
			cache: Fitness cache to share with other runs
			seed: Random seed for reproducibility
			verbose: Log one line per generation
			logger: Logging function (default: print)
			selection, crossover, mutation: Operator overrides

		Raises:
			ConfigError: on invalid parameters or layout configuration,
				before any permutation is created
		"""
		self._state = OptimizerState.INITIALIZED
		parameters.validate()
		super().__init__(
			layout_str, fixed_characters, layout_generator, evaluator,
			cache=cache, seed=seed, verbose=verbose, logger=logger,
		)
		self._parameters = replace(parameters)
		self._selection = selection or TournamentSelection(parameters.tournament_size)
		self._crossover = crossover or OrderCrossover()
		self._mutation = mutation or SwapMutation()

		self._generation = 0
		self._stagnant_generations = 0
		self._stop_reason: Optional[StopReason] = None
		self._best = BestTracker[Permutation]()
		self._progress = ProgressTracker(
			logger=self._log,
			minimize=False,
			prefix="[GA]",
			total_generations=parameters.generation_limit,
		)

		# (individual, fitness) pairs; fitness None until evaluated
		self._population: list[tuple[Permutation, Optional[float]]] = []
		for i in range(parameters.population_size):
			self._population.append((self._starting_permutation(start_with_layout and i == 0), None))

		self._log(
			f"[GA] Initialized: population={parameters.population_size}, "
			f"slots={self._permutation_generator.num_slots}, "
			f"fixed='{self._permutation_generator.fixed_characters}', "
			f"seeded={start_with_layout}"
		)
		self._state = OptimizerState.STEPPING

	@property
	def name(self) -> str:
		return "GeneticAlgorithm"

	@property
	def state(self) -> OptimizerState:
		return self._state

	@property
	def generation(self) -> int:
		"""Number of generations produced so far."""
		return self._generation

	@property
	def stop_reason(self) -> Optional[StopReason]:
		return self._stop_reason

	@property
	def population(self) -> list[tuple[Permutation, Optional[float]]]:
		return list(self._population)

	@property
	def best_fitness(self) -> Optional[float]:
		return self._best.fitness

	@property
	def best_permutation(self) -> Optional[Permutation]:
		return self._best.item

	@property
	def history(self) -> list[ProgressStats]:
		return self._progress.history

	def current_parameters(self) -> GeneticParameters:
		"""Copy of the validated parameters."""
		return replace(self._parameters)

	def best_layout(self) -> Optional[Layout]:
		"""All-time best layout, freshly materialized (None before the first step)."""
		if not self._best.has_best:
			return None
		return self.layout_for(self._best.item)

	def best_evaluation(self) -> Optional[LayoutEvaluation]:
		if not self._best.has_best:
			return None
		return self._layout_evaluation(self._best.item)

	@staticmethod
	def fitness_of(result: EvaluationResult) -> float:
		"""Fitness of an evaluation result (higher is better)."""
		return -result.total_cost

	def step(self) -> StepOutcome:
		"""
		Produce one generation.

		Evaluation failures do not raise: they end the run with a FAILED
		outcome that still carries the all-time best.

		Raises:
			AlreadyTerminatedError: if the run already ended
			InvalidPermutationError: if an operator produced an invalid permutation;
				the run is over afterwards
		"""
		if self._state.is_terminal:
			raise AlreadyTerminatedError(
				f"Genetic optimization already ended ({self._state.name}) after {self._generation} generations"
			)
		try:
			return self._advance()
		except InvalidPermutationError:
			self._state = OptimizerState.FAILED
			self._stop_reason = StopReason.FAILED
			raise
		except Exception as e:
			self._state = OptimizerState.FAILED
			self._stop_reason = StopReason.FAILED
			reason = f"{type(e).__name__}: {e}"
			self._logger(f"[GA] Generation {self._generation + 1} failed: {reason}")
			return StepOutcome(
				kind=StepKind.FAILED,
				generation=self._generation,
				best=self._best_solution(),
				stop_reason=StopReason.FAILED,
				reason=reason,
			)

	def _advance(self) -> StepOutcome:
		cfg = self._parameters

		if self._generation == 0:
			population = self._population
		else:
			population = self._next_generation(self._population)
		population = self._evaluate_population(population)

		self._population = population
		self._generation += 1

		fitness = [f for _, f in population]
		gen_best_idx = max(range(len(fitness)), key=lambda i: fitness[i])
		gen_best_perm, gen_best_fitness = population[gen_best_idx]

		if self._best.offer(gen_best_fitness, gen_best_perm):
			self._stagnant_generations = 0
		else:
			self._stagnant_generations += 1
		self._progress.tick(fitness, generation=self._generation)

		if self._generation >= cfg.generation_limit:
			self._stop_reason = StopReason.MAX_ITERATIONS
		elif cfg.stagnation_limit is not None and self._stagnant_generations >= cfg.stagnation_limit:
			self._stop_reason = StopReason.CONVERGENCE

		best = self._best_solution()
		if self._stop_reason is not None:
			self._state = OptimizerState.CONVERGED
			self._log(
				f"[GA] Final after {self._generation} generations ({self._stop_reason.name}): "
				f"best cost={-self._best.fitness:.4f}, cache={self._cache}"
			)
			self._progress.log_summary()
			return StepOutcome(
				kind=StepKind.FINAL,
				generation=self._generation,
				best=best,
				generation_best_fitness=gen_best_fitness,
				stop_reason=self._stop_reason,
			)

		return StepOutcome(
			kind=StepKind.INTERMEDIATE,
			generation=self._generation,
			best=best,
			generation_best_fitness=gen_best_fitness,
		)

	def _next_generation(
		self,
		population: list[tuple[Permutation, float]],
	) -> list[tuple[Permutation, Optional[float]]]:
		"""Elites with their cached fitness, then unevaluated offspring."""
		cfg = self._parameters
		rng = self._rng

		ranked = sorted(range(len(population)), key=lambda i: population[i][1], reverse=True)
		new_population: list[tuple[Permutation, Optional[float]]] = [population[i] for i in ranked[:cfg.elitism]]

		while len(new_population) < cfg.population_size:
			p1 = self._selection.select(population, rng)
			p2 = self._selection.select(population, rng)
			if rng.random() < cfg.crossover_rate:
				child = self._crossover.crossover(p1, p2, rng)
			else:
				child = p1
			child = self._mutation.mutate(child, cfg.mutation_rate, rng)
			new_population.append((child, None))

		return new_population

	def _evaluate_population(
		self,
		population: list[tuple[Permutation, Optional[float]]],
	) -> list[tuple[Permutation, float]]:
		"""Evaluate individuals with unknown fitness, keep known values."""
		result = []
		for individual, fitness in population:
			if fitness is None:
				self._permutation_generator.validate(individual)
				fitness = self.fitness_of(self._evaluate(individual))
			result.append((individual, fitness))
		return result

	def _best_solution(self) -> Optional[BestSolution]:
		if not self._best.has_best:
			return None
		fitness, permutation = self._best.best
		return BestSolution(fitness=fitness, permutation=permutation, evaluation=self._layout_evaluation(permutation))

	def __repr__(self) -> str:
		return (
			f"GeneticOptimizer(parameters={self._parameters}, state={self._state.name}, "
			f"generation={self._generation}, seed={self._seed})"
		)
