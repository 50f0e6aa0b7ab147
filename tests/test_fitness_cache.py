"""Tests for FitnessCache."""

import pytest

from layopt.core.errors import ConfigError
from layopt.optimization.cache import FitnessCache
from layopt.optimization.permutation import PermutationLayoutGenerator

from conftest import BASE_LAYOUT


class TestFitnessCache:

	def test_computes_once_per_permutation(self):
		cache = FitnessCache()
		calls = []

		def compute():
			calls.append(1)
			return 42.0

		assert cache.get_or_compute((0, 1, 2), compute) == (42.0, False)
		assert cache.get_or_compute((0, 1, 2), compute) == (42.0, True)
		assert len(calls) == 1
		assert cache.hits == 1
		assert cache.misses == 1
		assert cache.hit_rate == 0.5

	def test_keyed_by_value(self):
		cache = FitnessCache()
		cache.get_or_compute([2, 0, 1], lambda: "first")
		result, cached = cache.get_or_compute((2, 0, 1), lambda: "second")
		assert (result, cached) == ("first", True)
		assert (2, 0, 1) in cache
		assert len(cache) == 1

	def test_distinct_permutations_do_not_collide(self):
		cache = FitnessCache()
		cache.get_or_compute((0, 1), lambda: 1.0)
		cache.get_or_compute((1, 0), lambda: 2.0)
		assert cache.get((0, 1)) == 1.0
		assert cache.get((1, 0)) == 2.0
		assert sorted(cache) == [(0, 1), (1, 0)]

	def test_failed_computation_is_not_stored(self):
		cache = FitnessCache()

		def fail():
			raise RuntimeError("boom")

		with pytest.raises(RuntimeError):
			cache.get_or_compute((0, 1), fail)
		assert (0, 1) not in cache
		assert cache.get_or_compute((0, 1), lambda: 3.0) == (3.0, False)

	def test_empty_cache(self):
		cache = FitnessCache()
		assert cache.get((0,)) is None
		assert cache.hit_rate == 0.0


class TestBinding:

	def test_first_bind_wins(self):
		cache = FitnessCache()
		assert cache.signature is None
		cache.bind(("abcd", ("a", "b")))
		cache.bind(("abcd", ("a", "b")))
		assert cache.signature == ("abcd", ("a", "b"))

	def test_other_signature_refused(self):
		cache = FitnessCache()
		cache.bind(("abcd", ("a", "b")))
		with pytest.raises(ConfigError, match="abcd"):
			cache.bind(("abcd", ("c", "d")))

	def test_generator_signature_covers_fixed_characters(self, generator):
		free = PermutationLayoutGenerator(BASE_LAYOUT, "", generator)
		fixed = PermutationLayoutGenerator(BASE_LAYOUT, "a", generator)
		assert free.signature != fixed.signature
		assert free.signature == PermutationLayoutGenerator("abcd efgh", "", generator).signature
