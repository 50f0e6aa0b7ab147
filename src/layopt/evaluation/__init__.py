"""
Layout evaluation: n-gram tables, metrics and the evaluation contract.

Usage:
	from layopt.evaluation import Evaluator, EvaluationParameters, Unigrams, Bigrams

	corpus = open("corpus.txt").read()
	evaluator = Evaluator.from_parameters(
		EvaluationParameters(),
		Unigrams.from_text(corpus),
		Bigrams.from_text(corpus),
	)
	print(evaluator.evaluate_layout(layout))
"""

from layopt.evaluation.ngrams import NgramFrequencies, Unigrams, Bigrams, Trigrams
from layopt.evaluation.results import MetricResult, EvaluationResult, LayoutEvaluation
from layopt.evaluation.metrics import LayoutMetric, KeyCostMetric, BigramTravelMetric, TrigramTravelMetric
from layopt.evaluation.evaluator import EvaluationContract, EvaluationParameters, Evaluator

__all__ = [
	# N-grams
	'NgramFrequencies',
	'Unigrams',
	'Bigrams',
	'Trigrams',
	# Results
	'MetricResult',
	'EvaluationResult',
	'LayoutEvaluation',
	# Metrics
	'LayoutMetric',
	'KeyCostMetric',
	'BigramTravelMetric',
	'TrigramTravelMetric',
	# Evaluator
	'EvaluationContract',
	'EvaluationParameters',
	'Evaluator',
]
