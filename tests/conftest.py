"""
Shared fixtures: an 8-key keyboard with key costs 1..8 and unigram weights
that make "hgfedcba" the cheapest arrangement of "abcdefgh".
"""

import pytest

from layopt.core.errors import EvaluationError
from layopt.evaluation.evaluator import Evaluator
from layopt.evaluation.metrics import KeyCostMetric
from layopt.evaluation.ngrams import Unigrams
from layopt.evaluation.results import EvaluationResult, MetricResult
from layopt.layout.keyboard import Keyboard
from layopt.layout.layout import KeyboardLayoutGenerator


BASE_LAYOUT = "abcdefgh"
OPTIMAL_LAYOUT = "hgfedcba"


class CountingEvaluator:
	"""Wraps an evaluator, counts calls and can be told to fail."""

	def __init__(self, inner, fail_after=None):
		self._inner = inner
		self.calls = 0
		self.fail_after = fail_after

	def evaluate_layout(self, layout):
		self.calls += 1
		if self.fail_after is not None and self.calls > self.fail_after:
			raise EvaluationError(f"refusing to evaluate '{layout.as_text()}'")
		return self._inner.evaluate_layout(layout)


class ConstantEvaluator:
	"""Every layout costs the same."""

	def __init__(self, cost=1.0):
		self.cost = cost
		self.calls = 0

	def evaluate_layout(self, layout):
		self.calls += 1
		return EvaluationResult((MetricResult(name="constant", cost=self.cost),))


class RecordingObserver:
	def __init__(self):
		self.starts = []
		self.progress = []
		self.new_best = []

	def on_start(self, max_iterations):
		self.starts.append(max_iterations)

	def on_progress(self, iteration):
		self.progress.append(iteration)

	def on_new_best(self, layout_text, cost):
		self.new_best.append((layout_text, cost))


@pytest.fixture
def keyboard():
	return Keyboard("tiny", rows=[4, 4], costs=[[1, 2, 3, 4], [5, 6, 7, 8]])


@pytest.fixture
def generator(keyboard):
	return KeyboardLayoutGenerator(keyboard)


@pytest.fixture
def unigrams():
	return Unigrams({c: float(i + 1) for i, c in enumerate(BASE_LAYOUT)})


@pytest.fixture
def evaluator(unigrams):
	return Evaluator([KeyCostMetric(unigrams, layer_penalty=0.0)])


@pytest.fixture
def counting_evaluator(evaluator):
	return CountingEvaluator(evaluator)


@pytest.fixture
def observer():
	return RecordingObserver()
