"""
Unigram, bigram and trigram frequency tables.

Tables are normalized so their weights sum to 1. They can be read from
frequency text (one "<weight> <ngram>" entry per line) or counted from a
raw corpus.
"""

import math
from collections import Counter
from typing import Iterator, Mapping

from layopt.core.errors import ParseError


class NgramFrequencies(Mapping[str, float]):
	"""Normalized frequencies of fixed-length n-grams."""

	order: int = 0

	def __init__(self, weights: Mapping[str, float]):
		for ngram, weight in weights.items():
			if len(ngram) != self.order:
				raise ParseError(f"{type(self).__name__}: '{ngram}' is not a {self.order}-gram")
			if not math.isfinite(weight):
				raise ParseError(f"{type(self).__name__}: non-finite weight {weight} for '{ngram}'")
			if weight < 0:
				raise ParseError(f"{type(self).__name__}: negative weight {weight} for '{ngram}'")
		total = sum(weights.values())
		if not math.isfinite(total):
			raise ParseError(f"{type(self).__name__}: weights overflow to {total}")
		self._freqs = {k: v / total for k, v in weights.items()} if total > 0 else {}

	@classmethod
	def from_frequencies_str(cls, text: str):
		"""
		Parse "<weight> <ngram>" lines.

		The n-gram is everything after the first space, so it may itself
		contain spaces. Blank lines are skipped; repeated n-grams add up.
		"""
		weights: Counter = Counter()
		for line_nr, line in enumerate(text.splitlines(), start=1):
			if not line.strip():
				continue
			weight_str, sep, ngram = line.lstrip().partition(" ")
			if not sep:
				raise ParseError(f"Line {line_nr}: expected '<weight> <ngram>', got '{line}'")
			try:
				weight = float(weight_str)
			except ValueError as e:
				raise ParseError(f"Line {line_nr}: invalid weight '{weight_str}'") from e
			if not math.isfinite(weight):
				raise ParseError(f"Line {line_nr}: non-finite weight '{weight_str}'")
			weights[ngram] += weight
		return cls(weights)

	@classmethod
	def from_text(cls, text: str):
		"""Count n-grams in a raw corpus."""
		n = cls.order
		counts = Counter(text[i:i + n] for i in range(len(text) - n + 1))
		return cls(counts)

	def most_common(self, n: int) -> list[tuple[str, float]]:
		return sorted(self._freqs.items(), key=lambda kv: (-kv[1], kv[0]))[:n]

	def __getitem__(self, ngram: str) -> float:
		return self._freqs[ngram]

	def __iter__(self) -> Iterator[str]:
		return iter(self._freqs)

	def __len__(self) -> int:
		return len(self._freqs)

	def __repr__(self) -> str:
		return f"{type(self).__name__}({len(self._freqs)} entries)"


class Unigrams(NgramFrequencies):
	order = 1


class Bigrams(NgramFrequencies):
	order = 2


class Trigrams(NgramFrequencies):
	order = 3
