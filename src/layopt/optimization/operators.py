"""
Search operators: the swappable parts of the two optimizers.

Annealing uses a NeighborProposal (propose_next), an AcceptanceRule (accept)
and a cooling function. The genetic optimizer uses a selection, a crossover
and a mutation operator. Every operator draws randomness from the
random.Random passed in, so a run is reproducible from its seed.

All operators map permutations to permutations: every result is again a
bijection over the same slots.
"""

import math
import random
from typing import Callable, Protocol, Sequence, TypeVar

from layopt.core.states import CoolingSchedule
from layopt.optimization.permutation import Permutation


# =============================================================================
# Annealing operators
# =============================================================================

class NeighborProposal(Protocol):
	def propose_next(self, permutation: Permutation, rng: random.Random) -> Permutation:
		...


class AcceptanceRule(Protocol):
	def accept(self, old_cost: float, new_cost: float, temperature: float, rng: random.Random) -> bool:
		...


class SwapProposal:
	"""Neighbor by swapping the contents of two random slots, key_switches times."""

	def __init__(self, key_switches: int = 1):
		self._key_switches = key_switches

	def propose_next(self, permutation: Permutation, rng: random.Random) -> Permutation:
		perm = list(permutation)
		if len(perm) < 2:
			return tuple(perm)
		for _ in range(self._key_switches):
			i, j = rng.sample(range(len(perm)), 2)
			perm[i], perm[j] = perm[j], perm[i]
		return tuple(perm)

	def __repr__(self) -> str:
		return f"SwapProposal(key_switches={self._key_switches})"


class MetropolisAcceptance:
	"""
	Metropolis criterion on costs (lower is better).

	Improvements are always accepted; a worse candidate is accepted with
	probability exp(-delta / T), never at T <= 0.
	"""

	def accept(self, old_cost: float, new_cost: float, temperature: float, rng: random.Random) -> bool:
		delta = new_cost - old_cost
		if delta < 0:
			return True
		if temperature <= 0:
			return False
		return rng.random() < math.exp(-delta / temperature)

	def __repr__(self) -> str:
		return "MetropolisAcceptance()"


def cooling_function(schedule: CoolingSchedule, cooling_rate: float = 0.95) -> Callable[[float, int], float]:
	"""
	Temperature as a function of (initial temperature, 1-based iteration).

	exponential: T0 * rate^k
	fast:        T0 / k
	boltzmann:   T0 / ln(k + 1)
	"""
	schedule = CoolingSchedule(schedule)
	if schedule == CoolingSchedule.EXPONENTIAL:
		return lambda t0, k: t0 * cooling_rate ** k
	if schedule == CoolingSchedule.FAST:
		return lambda t0, k: t0 / k
	return lambda t0, k: t0 / math.log(k + 1)


# =============================================================================
# Genetic operators
# =============================================================================

G = TypeVar('G')


class TournamentSelection:
	"""Pick the fittest of a random subset (higher fitness wins)."""

	def __init__(self, tournament_size: int = 3):
		self._size = tournament_size

	def select(self, population: Sequence[tuple[G, float]], rng: random.Random) -> G:
		indices = rng.sample(range(len(population)), min(self._size, len(population)))
		best_idx = max(indices, key=lambda i: population[i][1])
		return population[best_idx][0]

	def __repr__(self) -> str:
		return f"TournamentSelection(tournament_size={self._size})"


class OrderCrossover:
	"""
	Order crossover (OX1).

	The child takes a random slice from the first parent and fills the
	remaining slots with the missing indices in the order they appear in
	the second parent, which keeps the child a valid permutation.
	"""

	def crossover(self, parent1: Permutation, parent2: Permutation, rng: random.Random) -> Permutation:
		n = len(parent1)
		if n < 2:
			return tuple(parent1)
		start, end = sorted(rng.sample(range(n + 1), 2))
		child: list[int] = [-1] * n
		child[start:end] = parent1[start:end]
		taken = set(parent1[start:end])
		fill = (g for g in parent2 if g not in taken)
		for i in range(n):
			if child[i] == -1:
				child[i] = next(fill)
		return tuple(child)

	def __repr__(self) -> str:
		return "OrderCrossover()"


class SwapMutation:
	"""Each slot is swapped with a random other slot with probability mutation_rate."""

	def mutate(self, permutation: Permutation, mutation_rate: float, rng: random.Random) -> Permutation:
		perm = list(permutation)
		n = len(perm)
		if n < 2:
			return tuple(perm)
		for i in range(n):
			if rng.random() < mutation_rate:
				j = rng.randrange(n - 1)
				if j >= i:
					j += 1
				perm[i], perm[j] = perm[j], perm[i]
		return tuple(perm)

	def __repr__(self) -> str:
		return "SwapMutation()"
