"""
Tests for search operators.

Every operator result must again be a bijection over the slots.
"""

import math
import random

import pytest

from layopt.core.states import CoolingSchedule
from layopt.optimization.operators import (
	MetropolisAcceptance,
	OrderCrossover,
	SwapMutation,
	SwapProposal,
	TournamentSelection,
	cooling_function,
)
from layopt.optimization.permutation import is_valid_permutation


def random_perm(rng, n):
	perm = list(range(n))
	rng.shuffle(perm)
	return tuple(perm)


class TestPermutationValidity:

	@pytest.mark.parametrize("key_switches", [1, 2, 5])
	def test_swap_proposal(self, key_switches):
		rng = random.Random(key_switches)
		proposal = SwapProposal(key_switches)
		perm = tuple(range(9))
		for _ in range(200):
			perm = proposal.propose_next(perm, rng)
			assert is_valid_permutation(perm, 9)

	def test_single_swap_changes_two_slots(self):
		rng = random.Random(0)
		perm = tuple(range(6))
		neighbor = SwapProposal(1).propose_next(perm, rng)
		assert sum(a != b for a, b in zip(perm, neighbor)) == 2

	@pytest.mark.parametrize("rate", [0.1, 0.5, 1.0])
	def test_swap_mutation(self, rate):
		rng = random.Random(11)
		for _ in range(200):
			perm = SwapMutation().mutate(random_perm(rng, 7), rate, rng)
			assert is_valid_permutation(perm, 7)

	def test_zero_mutation_rate_keeps_permutation(self):
		rng = random.Random(1)
		perm = random_perm(rng, 7)
		assert SwapMutation().mutate(perm, 0.0, rng) == perm

	def test_order_crossover(self):
		rng = random.Random(5)
		for _ in range(200):
			child = OrderCrossover().crossover(random_perm(rng, 8), random_perm(rng, 8), rng)
			assert is_valid_permutation(child, 8)

	def test_crossover_of_identical_parents(self):
		rng = random.Random(2)
		parent = random_perm(rng, 8)
		assert OrderCrossover().crossover(parent, parent, rng) == parent

	def test_single_slot(self):
		rng = random.Random(0)
		assert SwapProposal(3).propose_next((0,), rng) == (0,)
		assert SwapMutation().mutate((0,), 1.0, rng) == (0,)
		assert OrderCrossover().crossover((0,), (0,), rng) == (0,)


class TestMetropolisAcceptance:

	def test_improvement_always_accepted(self):
		rng = random.Random(0)
		assert MetropolisAcceptance().accept(2.0, 1.0, 0.0, rng)

	def test_worse_rejected_at_zero_temperature(self):
		rng = random.Random(0)
		assert not MetropolisAcceptance().accept(1.0, 2.0, 0.0, rng)

	def test_acceptance_rate_matches_boltzmann_factor(self):
		rng = random.Random(0)
		rule = MetropolisAcceptance()
		accepted = sum(rule.accept(1.0, 1.5, 1.0, rng) for _ in range(20000))
		assert accepted / 20000 == pytest.approx(math.exp(-0.5), abs=0.02)


class TestCooling:

	def test_exponential(self):
		cool = cooling_function(CoolingSchedule.EXPONENTIAL, 0.5)
		assert cool(8.0, 1) == 4.0
		assert cool(8.0, 3) == 1.0

	def test_fast(self):
		cool = cooling_function(CoolingSchedule.FAST)
		assert cool(10.0, 4) == 2.5

	def test_boltzmann(self):
		cool = cooling_function("boltzmann")
		assert cool(10.0, 1) == pytest.approx(10.0 / math.log(2))

	def test_schedules_decrease(self):
		for schedule in CoolingSchedule:
			cool = cooling_function(schedule, 0.9)
			temps = [cool(1.0, k) for k in range(1, 50)]
			assert all(a > b for a, b in zip(temps, temps[1:]))


class TestTournamentSelection:

	def test_full_tournament_picks_fittest(self):
		rng = random.Random(0)
		population = [((0, 1), -3.0), ((1, 0), -1.0), ((0, 1), -2.0)]
		for _ in range(10):
			assert TournamentSelection(3).select(population, rng) == (1, 0)

	def test_tournament_larger_than_population(self):
		rng = random.Random(0)
		population = [((0, 1), 1.0), ((1, 0), 2.0)]
		assert TournamentSelection(10).select(population, rng) == (1, 0)
