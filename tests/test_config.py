"""Tests for YAML configuration of parameters and layouts."""

import pytest

from layopt.core.errors import ConfigError
from layopt.evaluation.evaluator import EvaluationParameters
from layopt.layout.config import DEFAULT_BASE_LAYOUT, LayoutConfig
from layopt.optimization.annealing import AnnealingParameters
from layopt.optimization.genetic import GeneticParameters


class TestYamlRoundTrip:

	def test_genetic_parameters(self, tmp_path):
		params = GeneticParameters(population_size=12, mutation_rate=0.2, stagnation_limit=5)
		path = tmp_path / "runs" / "genetic.yaml"
		params.save_yaml(str(path))
		assert GeneticParameters.load_yaml(str(path)) == params

	def test_annealing_parameters(self):
		params = AnnealingParameters(initial_temperature=3.0, cooling="boltzmann", stall_best=100)
		loaded = AnnealingParameters.from_yaml(params.to_yaml())
		assert loaded == params
		loaded.validate()

	def test_layout_config(self):
		config = LayoutConfig(keyboard={"name": "tiny", "rows": [2, 2]}, base_layout="ab cd", shift_map={})
		assert LayoutConfig.from_yaml(config.to_yaml()) == config

	def test_partial_yaml_uses_defaults(self):
		params = GeneticParameters.from_yaml("population_size: 20\n")
		assert params.population_size == 20
		assert params.generation_limit == GeneticParameters().generation_limit

	def test_empty_yaml_gives_defaults(self):
		assert EvaluationParameters.from_yaml("") == EvaluationParameters()


class TestYamlErrors:

	def test_unknown_field(self):
		with pytest.raises(ConfigError, match="unknown fields"):
			GeneticParameters.from_yaml("population: 20\n")

	def test_not_a_mapping(self):
		with pytest.raises(ConfigError):
			AnnealingParameters.from_yaml("- 1\n- 2\n")

	def test_invalid_yaml(self):
		with pytest.raises(ConfigError):
			LayoutConfig.from_yaml("keyboard: [unclosed\n")

	def test_missing_file(self, tmp_path):
		with pytest.raises(ConfigError):
			GeneticParameters.load_yaml(str(tmp_path / "missing.yaml"))


class TestLayoutConfig:

	def test_default_config_builds(self):
		config = LayoutConfig()
		layout = config.base()
		assert layout.as_text() == "".join(DEFAULT_BASE_LAYOUT.split())
		assert layout.symbol_at(29, layer=1) == "?"
		assert layout.symbol_at(0, layer=1) == "Q"

	def test_base_layout_must_fit_keyboard(self):
		config = LayoutConfig(keyboard={"rows": [3]}, base_layout="abcd")
		with pytest.raises(ConfigError):
			config.build_generator()

	def test_unknown_keyboard_key(self):
		config = LayoutConfig(keyboard={"rows": [2], "shape": "round"}, base_layout="ab")
		with pytest.raises(ConfigError):
			config.build_keyboard()

	def test_evaluation_parameters_validated(self):
		with pytest.raises(ConfigError):
			EvaluationParameters(key_cost_weight=-1.0).validate()
