"""Tests for BestTracker and ProgressTracker."""

import pytest

from layopt.progress import BestTracker, ProgressTracker


class TestBestTracker:

	def test_first_offer_is_kept(self):
		tracker = BestTracker()
		assert not tracker.has_best
		assert tracker.best is None
		assert tracker.offer(-5.0, "a")
		assert tracker.best == (-5.0, "a")

	def test_only_strictly_better_replaces(self):
		tracker = BestTracker()
		tracker.offer(-5.0, "a")
		assert not tracker.offer(-6.0, "worse")
		assert not tracker.offer(-5.0, "tie")
		assert tracker.item == "a"
		assert tracker.offer(-4.0, "better")
		assert tracker.best == (-4.0, "better")
		assert tracker.updates == 2

	def test_never_regresses(self):
		tracker = BestTracker()
		values = [3.0, 1.0, 4.0, 1.0, 5.0, 9.0, 2.0, 6.0]
		seen = []
		for i, v in enumerate(values):
			tracker.offer(v, i)
			seen.append(tracker.fitness)
		assert seen == sorted(seen)
		assert tracker.best == (9.0, 5)

	def test_minimize(self):
		tracker = BestTracker(minimize=True)
		tracker.offer(3.0, "a")
		assert tracker.offer(2.0, "b")
		assert not tracker.offer(2.5, "c")
		assert tracker.item == "b"
		assert tracker.is_better(1.0)
		assert not tracker.is_better(2.0)


class TestProgressTracker:

	def test_tick_records_stats(self):
		lines = []
		tracker = ProgressTracker(logger=lines.append, minimize=False, prefix="[GA]", total_generations=5)
		stats = tracker.tick([-3.0, -1.0, -2.0], generation=1)
		assert stats.best_current == -1.0
		assert stats.worst_current == -3.0
		assert stats.avg_current == pytest.approx(-2.0)
		assert stats.improved
		assert lines == ["[GA] [Gen 1/5] best=-1.0000, current=-1.0000, avg=-2.0000 *"]

	def test_global_best_survives_worse_generation(self):
		tracker = ProgressTracker(logger=lambda _: None, minimize=False)
		tracker.tick([-1.0], generation=1)
		stats = tracker.tick([-2.0], generation=2)
		assert stats.best_global == -1.0
		assert not stats.improved
		assert tracker.best_generation == 1

	def test_empty_fitness_rejected(self):
		tracker = ProgressTracker(logger=lambda _: None)
		with pytest.raises(ValueError):
			tracker.tick([])
