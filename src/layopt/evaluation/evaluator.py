"""
The evaluation contract and the reference evaluator.

Optimizers only rely on EvaluationContract: a deterministic
evaluate_layout(layout) -> EvaluationResult. Anything with that method can
drive a search; Evaluator is the weighted-metric implementation shipped here.
"""

import math
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, runtime_checkable

from layopt.core.config import YamlConfigMixin
from layopt.core.errors import ConfigError, EvaluationError
from layopt.evaluation.metrics import BigramTravelMetric, KeyCostMetric, LayoutMetric, TrigramTravelMetric
from layopt.evaluation.ngrams import Bigrams, Trigrams, Unigrams
from layopt.evaluation.results import EvaluationResult
from layopt.layout.layout import Layout


@runtime_checkable
class EvaluationContract(Protocol):
	"""Scores a layout. Must return the same result for the same layout."""

	def evaluate_layout(self, layout: Layout) -> EvaluationResult:
		...


@dataclass
class EvaluationParameters(YamlConfigMixin):
	"""
	Metric weights of the reference evaluator.

	A weight of 0 disables the metric. With strict=True a layout that lacks
	any character of the unigram table is rejected with EvaluationError.
	"""
	key_cost_weight: float = 1.0
	layer_penalty: float = 1.0
	bigram_travel_weight: float = 0.5
	trigram_travel_weight: float = 0.25
	strict: bool = False

	def validate(self) -> None:
		for name in ("key_cost_weight", "layer_penalty", "bigram_travel_weight", "trigram_travel_weight"):
			value = getattr(self, name)
			if not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
				raise ConfigError(f"{name} must be a finite non-negative number, got {value!r}")


class Evaluator:
	"""
	Sums the weighted costs of a list of metrics.

	Usage:
		evaluator = Evaluator.from_parameters(EvaluationParameters(), unigrams, bigrams, trigrams)
		result = evaluator.evaluate_layout(layout)
		print(result.total_cost)
	"""

	def __init__(self, metrics: Sequence[LayoutMetric], required_symbols: Optional[Sequence[str]] = None):
		"""
		Args:
			metrics: Metrics to sum
			required_symbols: Symbols every layout must contain (None = no check)
		"""
		self._metrics = list(metrics)
		self._required = list(required_symbols) if required_symbols is not None else None

	@classmethod
	def from_parameters(
		cls,
		params: EvaluationParameters,
		unigrams: Unigrams,
		bigrams: Optional[Bigrams] = None,
		trigrams: Optional[Trigrams] = None,
	) -> 'Evaluator':
		params.validate()
		metrics: list[LayoutMetric] = []
		if params.key_cost_weight > 0:
			metrics.append(KeyCostMetric(unigrams, weight=params.key_cost_weight, layer_penalty=params.layer_penalty))
		if bigrams is not None and params.bigram_travel_weight > 0:
			metrics.append(BigramTravelMetric(bigrams, weight=params.bigram_travel_weight))
		if trigrams is not None and params.trigram_travel_weight > 0:
			metrics.append(TrigramTravelMetric(trigrams, weight=params.trigram_travel_weight))
		return cls(metrics, required_symbols=list(unigrams) if params.strict else None)

	@property
	def metrics(self) -> list[LayoutMetric]:
		return list(self._metrics)

	def evaluate_layout(self, layout: Layout) -> EvaluationResult:
		"""
		Raises:
			EvaluationError: if a required symbol has no key in the layout
		"""
		if self._required is not None:
			missing = [s for s in self._required if s not in layout]
			if missing:
				raise EvaluationError(f"Layout '{layout.as_text()}' has no key for {''.join(missing)!r}")
		return EvaluationResult(tuple(m.evaluate(layout) for m in self._metrics))

	def __repr__(self) -> str:
		return f"Evaluator(metrics={self._metrics})"
