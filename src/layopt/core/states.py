"""
State enums for optimization control.

Usage:
	from layopt.core.states import OptimizerState, StepKind

	if optimizer.state == OptimizerState.STEPPING:
		outcome = optimizer.step()
		if outcome.kind == StepKind.FINAL:
			...
"""

from enum import Enum, IntEnum, auto


class OptimizerState(IntEnum):
	"""
	Lifecycle of a steppable (genetic) optimizer.

	INITIALIZED: population is being built
	STEPPING: ready for the next step()
	CONVERGED: the strategy reported its final generation
	FAILED: a step failed; the all-time best is still readable
	"""
	INITIALIZED = auto()
	STEPPING = auto()
	CONVERGED = auto()
	FAILED = auto()

	@property
	def is_terminal(self) -> bool:
		return self in (OptimizerState.CONVERGED, OptimizerState.FAILED)


class StepKind(IntEnum):
	"""Kind of outcome returned by a single genetic step."""
	INTERMEDIATE = auto()
	FINAL = auto()
	FAILED = auto()


class StopReason(IntEnum):
	"""Reason why an optimization run stopped."""
	MAX_ITERATIONS = auto()  # Iteration or generation budget exhausted
	CONVERGENCE = auto()  # No improvement within the stall/stagnation limit
	CANCELLED = auto()  # Cancellation token was set by the caller
	FAILED = auto()  # Evaluation raised


class CoolingSchedule(str, Enum):
	"""Temperature schedules for simulated annealing."""
	EXPONENTIAL = "exponential"  # T0 * rate^k
	FAST = "fast"  # T0 / k
	BOLTZMANN = "boltzmann"  # T0 / ln(k + 1)
