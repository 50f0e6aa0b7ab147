"""
Tests for n-gram tables, metrics and the reference evaluator.

Arithmetic is checked on the 8-key keyboard from conftest (key costs 1..8,
rows of four keys one unit apart).
"""

import math

import pytest

from layopt.core.errors import ConfigError, EvaluationError, ParseError
from layopt.evaluation.evaluator import EvaluationContract, EvaluationParameters, Evaluator
from layopt.evaluation.metrics import BigramTravelMetric, KeyCostMetric, TrigramTravelMetric
from layopt.evaluation.ngrams import Bigrams, Trigrams, Unigrams
from layopt.evaluation.results import LayoutEvaluation

from conftest import BASE_LAYOUT, OPTIMAL_LAYOUT


class TestNgrams:

	def test_weights_are_normalized(self):
		unigrams = Unigrams.from_frequencies_str("10 a\n5 b\n\n5 c\n")
		assert unigrams["a"] == pytest.approx(0.5)
		assert sum(unigrams.values()) == pytest.approx(1.0)

	def test_ngram_may_contain_space(self):
		bigrams = Bigrams.from_frequencies_str("3 a \n1 ab\n")
		assert bigrams["a "] == pytest.approx(0.75)

	def test_repeated_entries_add_up(self):
		unigrams = Unigrams.from_frequencies_str("1 a\n1 a\n2 b\n")
		assert unigrams["a"] == pytest.approx(0.5)

	def test_invalid_weight(self):
		with pytest.raises(ParseError):
			Unigrams.from_frequencies_str("lots a\n")

	def test_wrong_order(self):
		with pytest.raises(ParseError):
			Unigrams.from_frequencies_str("1 ab\n")

	def test_negative_weight(self):
		with pytest.raises(ParseError):
			Unigrams({"a": -1.0})

	@pytest.mark.parametrize("text", ["nan a\n1 b\n1 c\n", "inf a\n1 b\n", "-inf a\n"])
	def test_non_finite_weight_in_text(self, text):
		with pytest.raises(ParseError):
			Unigrams.from_frequencies_str(text)

	@pytest.mark.parametrize("weight", [math.nan, math.inf])
	def test_non_finite_weight(self, weight):
		with pytest.raises(ParseError):
			Bigrams({"ab": weight, "cd": 1.0})

	def test_weights_overflowing_total(self):
		with pytest.raises(ParseError):
			Unigrams({"a": 1e308, "b": 1e308})

	def test_trigrams(self):
		trigrams = Trigrams.from_frequencies_str("3 the\n1 he \n")
		assert trigrams["the"] == pytest.approx(0.75)
		assert Trigrams.from_text("abcab")["abc"] == pytest.approx(1 / 3)
		with pytest.raises(ParseError):
			Trigrams({"ab": 1.0})

	def test_counted_from_corpus(self):
		bigrams = Bigrams.from_text("abab")
		assert bigrams["ab"] == pytest.approx(2 / 3)
		assert bigrams.most_common(1) == [("ab", pytest.approx(2 / 3))]


class TestMetrics:

	def test_key_cost(self, generator, unigrams):
		metric = KeyCostMetric(unigrams, layer_penalty=0.0)
		base = metric.evaluate(generator.generate(BASE_LAYOUT))
		best = metric.evaluate(generator.generate(OPTIMAL_LAYOUT))
		assert base.cost == pytest.approx(204 / 36)
		assert best.cost == pytest.approx(120 / 36)
		assert base.message is None

	def test_shifted_symbol_pays_layer_penalty(self, generator):
		metric = KeyCostMetric(Unigrams({"A": 1.0}), layer_penalty=2.0)
		assert metric.evaluate(generator.generate(BASE_LAYOUT)).cost == pytest.approx(3.0)

	def test_missing_symbols_reported(self, generator):
		metric = KeyCostMetric(Unigrams({"a": 1.0, "z": 1.0}))
		result = metric.evaluate(generator.generate(BASE_LAYOUT))
		assert result.cost == pytest.approx(0.5)
		assert result.message == "50.00% not found"

	def test_bigram_travel(self, generator):
		metric = BigramTravelMetric(Bigrams({"ae": 1.0, "ah": 1.0}))
		result = metric.evaluate(generator.generate(BASE_LAYOUT))
		assert result.cost == pytest.approx((1.0 + math.sqrt(10)) / 2)

	def test_trigram_travel(self, generator):
		metric = TrigramTravelMetric(Trigrams({"abc": 1.0, "aeh": 1.0}))
		result = metric.evaluate(generator.generate(BASE_LAYOUT))
		assert result.name == "trigram_travel"
		assert result.cost == pytest.approx((2.0 + 4.0) / 2)

	def test_trigram_with_missing_symbol(self, generator):
		metric = TrigramTravelMetric(Trigrams({"abc": 1.0, "abz": 1.0}))
		result = metric.evaluate(generator.generate(BASE_LAYOUT))
		assert result.cost == pytest.approx(1.0)
		assert result.message == "50.00% not found"

	def test_weight_applies(self, generator, unigrams):
		metric = KeyCostMetric(unigrams, weight=2.0, layer_penalty=0.0)
		result = metric.evaluate(generator.generate(BASE_LAYOUT))
		assert result.weighted_cost == pytest.approx(2 * result.cost)


class TestEvaluator:

	def test_satisfies_contract(self, evaluator):
		assert isinstance(evaluator, EvaluationContract)

	def test_total_is_weighted_sum(self, generator, unigrams):
		bigrams = Bigrams({"ab": 1.0})
		evaluator = Evaluator.from_parameters(EvaluationParameters(layer_penalty=0.0), unigrams, bigrams)
		result = evaluator.evaluate_layout(generator.generate(BASE_LAYOUT))
		assert result.metric("key_cost").cost == pytest.approx(204 / 36)
		assert result.metric("bigram_travel").weighted_cost == pytest.approx(0.5)
		assert result.total_cost == pytest.approx(204 / 36 + 0.5)

	def test_zero_weight_disables_metric(self, unigrams):
		evaluator = Evaluator.from_parameters(EvaluationParameters(bigram_travel_weight=0.0), unigrams, Bigrams({"ab": 1.0}))
		assert [m.name for m in evaluator.metrics] == ["key_cost"]

	def test_trigrams_add_a_metric(self, generator, unigrams):
		evaluator = Evaluator.from_parameters(
			EvaluationParameters(layer_penalty=0.0, trigram_travel_weight=2.0),
			unigrams,
			Bigrams({"ab": 1.0}),
			Trigrams({"abc": 1.0}),
		)
		assert [m.name for m in evaluator.metrics] == ["key_cost", "bigram_travel", "trigram_travel"]
		result = evaluator.evaluate_layout(generator.generate(BASE_LAYOUT))
		assert result.metric("trigram_travel").weighted_cost == pytest.approx(4.0)
		assert result.total_cost == pytest.approx(204 / 36 + 0.5 + 4.0)

	def test_non_finite_parameter_rejected(self):
		with pytest.raises(ConfigError):
			EvaluationParameters(trigram_travel_weight=math.nan).validate()

	def test_deterministic(self, evaluator, generator):
		layout = generator.generate(BASE_LAYOUT)
		assert evaluator.evaluate_layout(layout) == evaluator.evaluate_layout(layout)

	def test_strict_rejects_missing_symbols(self, generator):
		evaluator = Evaluator.from_parameters(EvaluationParameters(strict=True), Unigrams({"a": 1.0, "z": 1.0}))
		with pytest.raises(EvaluationError):
			evaluator.evaluate_layout(generator.generate(BASE_LAYOUT))

	def test_unknown_metric(self, evaluator, generator):
		result = evaluator.evaluate_layout(generator.generate(BASE_LAYOUT))
		with pytest.raises(KeyError):
			result.metric("finger_roll")

	def test_layout_evaluation(self, evaluator, generator):
		layout = generator.generate(BASE_LAYOUT)
		evaluation = LayoutEvaluation.from_result(evaluator.evaluate_layout(layout), layout)
		assert evaluation.layout == BASE_LAYOUT
		assert evaluation.plot.splitlines()[:2] == ["a b c d", "e f g h"]
		assert "key_cost" in evaluation.printed
		assert evaluation.to_dict()["total_cost"] == evaluation.total_cost
