"""
Simulated Annealing optimizer for keyboard layouts.

Runs to completion once started:
- Single neighbor per iteration (swap of key_switches slot pairs)
- Probabilistic acceptance: worse layouts accepted with P = exp(-delta/T)
- Temperature decay per cooling schedule prevents premature freezing

Progress is reported synchronously through an AnnealingObserver:
on_start(max_iterations) once before the loop, on_progress(iteration)
every progress_interval completed iterations, and on_new_best(text, cost)
whenever an iteration finds a layout better than any seen before in the
run. Observers must not call back into the optimizer.

The run returns the best-ever layout. The last accepted layout can differ
from it at loop end and is reported in AnnealingResult.
"""

import math
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Protocol, runtime_checkable

from layopt.core.config import YamlConfigMixin
from layopt.core.errors import InvalidParameterError
from layopt.core.states import CoolingSchedule, StopReason
from layopt.evaluation.evaluator import EvaluationContract
from layopt.evaluation.results import LayoutEvaluation
from layopt.layout.layout import KeyboardLayoutGenerator, Layout
from layopt.optimization.base import OptimizerStrategyBase
from layopt.optimization.cache import FitnessCache
from layopt.optimization.operators import AcceptanceRule, MetropolisAcceptance, NeighborProposal, SwapProposal, cooling_function
from layopt.optimization.permutation import Permutation


DEFAULT_INITIAL_TEMPERATURE = 1.0


@dataclass
class AnnealingParameters(YamlConfigMixin):
	"""
	Configuration for Simulated Annealing.

	- initial_temperature: None or <= 0 is corrected to DEFAULT_INITIAL_TEMPERATURE
	- cooling: exponential (T0 * rate^k), fast (T0 / k) or boltzmann (T0 / ln(k + 1))
	- cooling_rate: decay factor of the exponential schedule, in (0, 1)
	- max_iterations: iteration budget
	- key_switches: slot swaps per proposed neighbor
	- progress_interval: iterations between on_progress notifications
	- stall_best: stop after this many iterations without a new best (None = never)
	"""
	initial_temperature: Optional[float] = None
	cooling: str = CoolingSchedule.EXPONENTIAL.value
	cooling_rate: float = 0.995
	max_iterations: int = 2000
	key_switches: int = 1
	progress_interval: int = 10
	stall_best: Optional[int] = None

	def correct_initial_temperature(self) -> bool:
		"""
		Replace a missing or non-positive initial temperature with the default.

		Returns:
			True if the temperature was changed

		Raises:
			InvalidParameterError: if the temperature is NaN, infinite or not a number
		"""
		t0 = self.initial_temperature
		if t0 is None:
			self.initial_temperature = DEFAULT_INITIAL_TEMPERATURE
			return True
		if isinstance(t0, bool) or not isinstance(t0, (int, float)) or not math.isfinite(t0):
			raise InvalidParameterError(f"initial_temperature cannot be corrected: {t0!r}")
		if t0 <= 0:
			self.initial_temperature = DEFAULT_INITIAL_TEMPERATURE
			return True
		return False

	def validate(self) -> None:
		"""
		Raises:
			InvalidParameterError: on any out-of-range value
		"""
		def is_int(value) -> bool:
			return isinstance(value, int) and not isinstance(value, bool)

		t0 = self.initial_temperature
		if t0 is not None and (
			isinstance(t0, bool) or not isinstance(t0, (int, float)) or not math.isfinite(t0)
		):
			raise InvalidParameterError(f"initial_temperature must be a finite number, got {t0!r}")
		try:
			CoolingSchedule(self.cooling)
		except ValueError as e:
			choices = ", ".join(s.value for s in CoolingSchedule)
			raise InvalidParameterError(f"cooling must be one of {choices}, got {self.cooling!r}") from e
		if not isinstance(self.cooling_rate, (int, float)) or not 0.0 < self.cooling_rate < 1.0:
			raise InvalidParameterError(f"cooling_rate must be within (0, 1), got {self.cooling_rate!r}")
		if not is_int(self.max_iterations) or self.max_iterations < 0:
			raise InvalidParameterError(f"max_iterations must be an integer >= 0, got {self.max_iterations!r}")
		if not is_int(self.key_switches) or self.key_switches < 1:
			raise InvalidParameterError(f"key_switches must be an integer >= 1, got {self.key_switches!r}")
		if not is_int(self.progress_interval) or self.progress_interval < 1:
			raise InvalidParameterError(f"progress_interval must be an integer >= 1, got {self.progress_interval!r}")
		if self.stall_best is not None and (not is_int(self.stall_best) or self.stall_best < 1):
			raise InvalidParameterError(f"stall_best must be None or an integer >= 1, got {self.stall_best!r}")


@runtime_checkable
class AnnealingObserver(Protocol):
	"""Receives progress of a blocking annealing run."""

	def on_start(self, max_iterations: int) -> None:
		...

	def on_progress(self, iteration: int) -> None:
		...

	def on_new_best(self, layout_text: str, cost: float) -> None:
		...


class LoggingObserver:
	"""Observer that writes every notification to a logger."""

	def __init__(self, logger: Optional[Callable[[str], None]] = None, prefix: str = "[SA]"):
		self._logger = logger or print
		self._prefix = prefix
		self._max_iterations = 0

	def on_start(self, max_iterations: int) -> None:
		self._max_iterations = max_iterations
		self._logger(f"{self._prefix} Starting: max_iterations={max_iterations}")

	def on_progress(self, iteration: int) -> None:
		self._logger(f"{self._prefix} Iter {iteration}/{self._max_iterations}")

	def on_new_best(self, layout_text: str, cost: float) -> None:
		self._logger(f"{self._prefix} New best: cost={cost:.4f} layout='{layout_text}'")


class CancellationToken:
	"""
	Cooperative cancellation for a running annealing search.

	The run checks the token once per iteration, so cancel() may be called
	from an observer callback or from another thread.
	"""

	def __init__(self):
		self._event = threading.Event()

	def cancel(self) -> None:
		self._event.set()

	@property
	def cancelled(self) -> bool:
		return self._event.is_set()

	def __repr__(self) -> str:
		return f"CancellationToken(cancelled={self.cancelled})"


@dataclass
class AnnealingResult:
	"""Outcome of one annealing run (costs: lower is better)."""
	initial_permutation: Permutation
	initial_cost: float
	best_permutation: Permutation
	best_cost: float
	last_permutation: Permutation
	last_cost: float
	best_evaluation: LayoutEvaluation
	iterations_run: int
	accepted: int
	stop_reason: StopReason
	initial_temperature: float
	final_temperature: float
	history: list[tuple[int, float]] = field(default_factory=list)  # (iteration, best cost)

	@property
	def improvement_percent(self) -> float:
		if self.initial_cost <= 0 or self.best_cost >= self.initial_cost:
			return 0.0
		return (self.initial_cost - self.best_cost) / self.initial_cost * 100


class SimulatedAnnealingOptimizer(OptimizerStrategyBase):
	"""
	Blocking simulated annealing over permutations of the movable characters.

	The algorithm:
	1. Start from the given layout (or a random permutation) at T0
	2. Propose a neighbor by swapping slots
	3. Accept if better, or with probability exp(-delta/T) if worse
	4. Cool down per schedule
	5. Repeat until the budget is spent, the best stalls or the run is cancelled

	Evaluation errors are not caught: they end the run and propagate.
	"""

	def __init__(
		self,
		parameters: AnnealingParameters,
		evaluator: EvaluationContract,
		layout_str: str,
		layout_generator: KeyboardLayoutGenerator,
		fixed_characters: str = "",
		start_with_layout: bool = False,
		observer: Optional[AnnealingObserver] = None,
		cache: Optional[FitnessCache] = None,
		seed: Optional[int] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
		cancellation: Optional[CancellationToken] = None,
		proposal: Optional[NeighborProposal] = None,
		acceptance: Optional[AcceptanceRule] = None,
	):
		"""
		Args:
			parameters: Annealing parameters; a copy is corrected and validated
			evaluator: Evaluation contract
			layout_str: Starting layout text
			layout_generator: Generator used for every layout of the run,
				including the text passed to on_new_best
			fixed_characters: Characters that keep their key
			start_with_layout: Start from layout_str instead of a random permutation
			observer: Receives start, progress and new-best notifications
			cache: Fitness cache to share with other runs
			seed: Random seed for reproducibility
			verbose: Log progress messages
			logger: Logging function (default: print)
			cancellation: Token checked once per iteration
			proposal, acceptance: Operator overrides

		Raises:
			InvalidParameterError: if a parameter is invalid and cannot be corrected
			ConfigError: if the starting layout and fixed characters do not fit
		"""
		params = replace(parameters)
		corrected = params.correct_initial_temperature()
		params.validate()
		super().__init__(
			layout_str, fixed_characters, layout_generator, evaluator,
			cache=cache, seed=seed, verbose=verbose, logger=logger,
		)
		self._parameters = params
		self._observer = observer
		self._cancellation = cancellation
		self._proposal = proposal or SwapProposal(params.key_switches)
		self._acceptance = acceptance or MetropolisAcceptance()
		self._cooling = cooling_function(CoolingSchedule(params.cooling), params.cooling_rate)
		self._start = self._starting_permutation(start_with_layout)

		if corrected:
			self._log(
				f"[SA] Initial temperature {parameters.initial_temperature!r} "
				f"corrected to {params.initial_temperature}"
			)

	@property
	def name(self) -> str:
		return "SimulatedAnnealing"

	@property
	def parameters(self) -> AnnealingParameters:
		return replace(self._parameters)

	@property
	def starting_permutation(self) -> Permutation:
		return self._start

	def _cost(self, permutation: Permutation) -> float:
		return self._evaluate(permutation).total_cost

	def run(self) -> AnnealingResult:
		"""Run the search to completion."""
		cfg = self._parameters
		observer = self._observer
		t0 = cfg.initial_temperature

		current = self._start
		current_cost = self._cost(current)
		initial_cost = current_cost
		best, best_cost = current, current_cost

		temperature = t0
		accepted = 0
		since_best = 0
		iterations = 0
		stop_reason = StopReason.MAX_ITERATIONS
		history = [(0, best_cost)]

		self._log(f"[SA] Initial cost: {current_cost:.4f}, T={temperature:.4f}, schedule={cfg.cooling}")
		if observer is not None:
			observer.on_start(cfg.max_iterations)

		for iteration in range(1, cfg.max_iterations + 1):
			if self._cancellation is not None and self._cancellation.cancelled:
				stop_reason = StopReason.CANCELLED
				self._log(f"[SA] Cancelled after {iterations} iterations")
				break

			candidate = self._proposal.propose_next(current, self._rng)
			self._permutation_generator.validate(candidate)
			candidate_cost = self._cost(candidate)

			temperature = self._cooling(t0, iteration)
			if self._acceptance.accept(current_cost, candidate_cost, temperature, self._rng):
				current, current_cost = candidate, candidate_cost
				accepted += 1

			iterations = iteration
			if current_cost < best_cost:
				best, best_cost = current, current_cost
				since_best = 0
				if observer is not None:
					observer.on_new_best(self._permutation_generator.generate_string(best), best_cost)
			else:
				since_best += 1

			if iteration % cfg.progress_interval == 0:
				history.append((iteration, best_cost))
				if observer is not None:
					observer.on_progress(iteration)
				self._log(
					f"[SA] Iter {iteration}: current={current_cost:.4f}, "
					f"best={best_cost:.4f}, T={temperature:.6f}"
				)

			if cfg.stall_best is not None and since_best >= cfg.stall_best:
				stop_reason = StopReason.CONVERGENCE
				self._log(f"[SA] No new best for {since_best} iterations, stopping at {iteration}")
				break

		result = AnnealingResult(
			initial_permutation=self._start,
			initial_cost=initial_cost,
			best_permutation=best,
			best_cost=best_cost,
			last_permutation=current,
			last_cost=current_cost,
			best_evaluation=self._layout_evaluation(best),
			iterations_run=iterations,
			accepted=accepted,
			stop_reason=stop_reason,
			initial_temperature=t0,
			final_temperature=temperature,
			history=history,
		)
		self._log(
			f"[SA] Done ({stop_reason.name}): {iterations} iterations, {accepted} accepted, "
			f"best={best_cost:.4f} ({result.improvement_percent:.2f}% better), cache={self._cache}"
		)
		return result

	def __repr__(self) -> str:
		return f"SimulatedAnnealingOptimizer(parameters={self._parameters}, seed={self._seed}, verbose={self._verbose})"


def optimize(
	layout_str: str,
	parameters: AnnealingParameters,
	fixed_characters: str,
	layout_generator: KeyboardLayoutGenerator,
	start_with_layout: bool,
	evaluator: EvaluationContract,
	observer: Optional[AnnealingObserver] = None,
	cache: Optional[FitnessCache] = None,
	seed: Optional[int] = None,
	cancellation: Optional[CancellationToken] = None,
	verbose: bool = False,
	logger: Optional[Callable[[str], None]] = None,
) -> Layout:
	"""
	Run simulated annealing and return the best layout found.

	Raises:
		InvalidParameterError: if the parameters are invalid and cannot be corrected
		ConfigError: if the starting layout and fixed characters do not fit
		EvaluationError: if the evaluator rejects a layout during the run
	"""
	optimizer = SimulatedAnnealingOptimizer(
		parameters,
		evaluator,
		layout_str,
		layout_generator,
		fixed_characters=fixed_characters,
		start_with_layout=start_with_layout,
		observer=observer,
		cache=cache,
		seed=seed,
		verbose=verbose,
		logger=logger,
		cancellation=cancellation,
	)
	result = optimizer.run()
	return optimizer.layout_for(result.best_permutation)
