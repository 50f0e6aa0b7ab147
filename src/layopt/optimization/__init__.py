"""
Permutation search over keyboard layouts.

Usage:
	from layopt.optimization import GeneticOptimizer, GeneticParameters

	optimizer = GeneticOptimizer(GeneticParameters(), evaluator, layout_str, generator)
	outcome = optimizer.step()

	from layopt.optimization import AnnealingParameters, optimize

	layout = optimize(layout_str, AnnealingParameters(), ",.", generator, True, evaluator)
"""

from layopt.optimization.permutation import Permutation, PermutationLayoutGenerator, is_valid_permutation
from layopt.optimization.cache import FitnessCache, EvaluationCache
from layopt.optimization.operators import (
	NeighborProposal,
	AcceptanceRule,
	SwapProposal,
	MetropolisAcceptance,
	cooling_function,
	TournamentSelection,
	OrderCrossover,
	SwapMutation,
)
from layopt.optimization.base import OptimizerStrategyBase
from layopt.optimization.genetic import GeneticParameters, GeneticOptimizer, StepOutcome, BestSolution
from layopt.optimization.annealing import (
	DEFAULT_INITIAL_TEMPERATURE,
	AnnealingParameters,
	AnnealingObserver,
	LoggingObserver,
	CancellationToken,
	AnnealingResult,
	SimulatedAnnealingOptimizer,
	optimize,
)

__all__ = [
	# Permutations
	'Permutation',
	'PermutationLayoutGenerator',
	'is_valid_permutation',
	# Cache
	'FitnessCache',
	'EvaluationCache',
	# Operators
	'NeighborProposal',
	'AcceptanceRule',
	'SwapProposal',
	'MetropolisAcceptance',
	'cooling_function',
	'TournamentSelection',
	'OrderCrossover',
	'SwapMutation',
	# Strategies
	'OptimizerStrategyBase',
	'GeneticParameters',
	'GeneticOptimizer',
	'StepOutcome',
	'BestSolution',
	'DEFAULT_INITIAL_TEMPERATURE',
	'AnnealingParameters',
	'AnnealingObserver',
	'LoggingObserver',
	'CancellationToken',
	'AnnealingResult',
	'SimulatedAnnealingOptimizer',
	'optimize',
]
