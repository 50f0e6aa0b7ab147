"""
Layout cost metrics.

Each metric turns a layout into a single cost (lower is better). N-gram
frequencies are turned into tensors once at construction; per layout only
the symbol -> key index lookup is rebuilt.
"""

from abc import ABC, abstractmethod
from typing import Optional

import torch
from torch import Tensor, tensor, float64, long

from layopt.evaluation.ngrams import Bigrams, NgramFrequencies, Trigrams, Unigrams
from layopt.evaluation.results import MetricResult
from layopt.layout.keyboard import Keyboard
from layopt.layout.layout import Layout


def _not_found_message(missing: float) -> Optional[str]:
	return f"{missing:.2%} not found" if missing > 0 else None


class LayoutMetric(ABC):
	"""Base class for metrics; subclasses implement compute()."""

	def __init__(self, weight: float = 1.0):
		self._weight = weight

	@property
	@abstractmethod
	def name(self) -> str:
		...

	@property
	def weight(self) -> float:
		return self._weight

	@abstractmethod
	def compute(self, layout: Layout) -> tuple[float, Optional[str]]:
		"""Return (cost, optional message)."""
		...

	def evaluate(self, layout: Layout) -> MetricResult:
		cost, message = self.compute(layout)
		return MetricResult(name=self.name, cost=cost, weight=self._weight, message=message)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(weight={self._weight})"


class KeyCostMetric(LayoutMetric):
	"""
	Unigram frequency times the base cost of the key that types it.

	Symbols on a shifted layer pay layer_penalty on top of the key cost.
	"""

	def __init__(self, unigrams: Unigrams, weight: float = 1.0, layer_penalty: float = 1.0):
		super().__init__(weight)
		self._symbols = list(unigrams)
		self._freqs = tensor([unigrams[s] for s in self._symbols], dtype=float64)
		self._layer_penalty = layer_penalty

	@property
	def name(self) -> str:
		return "key_cost"

	def compute(self, layout: Layout) -> tuple[float, Optional[str]]:
		if not self._symbols:
			return 0.0, None
		key_costs = tensor([k.cost for k in layout.keyboard.keys], dtype=float64)

		indices = []
		layers = []
		for symbol in self._symbols:
			found = layout.position_of(symbol)
			if found is None:
				indices.append(-1)
				layers.append(0)
			else:
				indices.append(found[0].index)
				layers.append(found[1])
		idx = tensor(indices, dtype=long)
		mask = idx >= 0

		shifted = (tensor(layers, dtype=long) > 0).to(float64)
		per_symbol = key_costs[idx.clamp(min=0)] + self._layer_penalty * shifted
		cost = (self._freqs * per_symbol * mask).sum().item()
		missing = self._freqs[~mask].sum().item()
		return cost, _not_found_message(missing)


class _TravelMetric(LayoutMetric):
	"""N-gram frequency times the distance walked from key to key."""

	def __init__(self, ngrams: NgramFrequencies, weight: float = 1.0):
		super().__init__(weight)
		self._ngrams = list(ngrams)
		self._order = ngrams.order
		self._freqs = tensor([ngrams[g] for g in self._ngrams], dtype=float64)
		self._distances: dict[Keyboard, Tensor] = {}

	def _distance_matrix(self, keyboard: Keyboard) -> Tensor:
		if keyboard not in self._distances:
			coords = tensor([[k.row, k.col] for k in keyboard.keys], dtype=float64)
			self._distances[keyboard] = torch.cdist(coords, coords)
		return self._distances[keyboard]

	def compute(self, layout: Layout) -> tuple[float, Optional[str]]:
		if not self._ngrams:
			return 0.0, None
		distances = self._distance_matrix(layout.keyboard)

		# (n-grams, order) key indices, -1 where the symbol has no key
		rows = []
		for ngram in self._ngrams:
			found = [layout.position_of(symbol) for symbol in ngram]
			rows.append([f[0].index if f is not None else -1 for f in found])
		idx = tensor(rows, dtype=long)
		mask = (idx >= 0).all(dim=1)

		safe = idx.clamp(min=0)
		travel = distances[safe[:, :-1], safe[:, 1:]].sum(dim=1)
		cost = (self._freqs * travel * mask).sum().item()
		missing = self._freqs[~mask].sum().item()
		return cost, _not_found_message(missing)


class BigramTravelMetric(_TravelMetric):
	"""Bigram frequency times the distance between the two keys."""

	def __init__(self, bigrams: Bigrams, weight: float = 1.0):
		super().__init__(bigrams, weight)

	@property
	def name(self) -> str:
		return "bigram_travel"


class TrigramTravelMetric(_TravelMetric):
	"""Trigram frequency times the distance from the first key over the second to the third."""

	def __init__(self, trigrams: Trigrams, weight: float = 1.0):
		super().__init__(trigrams, weight)

	@property
	def name(self) -> str:
		return "trigram_travel"
