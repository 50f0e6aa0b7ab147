"""Tests for keyboards, layouts and the keyboard layout generator."""

import math

import pytest

from layopt.core.errors import ConfigError, ParseError
from layopt.layout.keyboard import Keyboard
from layopt.layout.layout import KeyboardLayoutGenerator

from conftest import BASE_LAYOUT


class TestKeyboard:

	def test_keys_in_reading_order(self, keyboard):
		assert keyboard.num_keys == 8
		assert keyboard.key(5).row == 1
		assert keyboard.key(5).col == 1
		assert keyboard.key(5).cost == 6.0

	def test_default_costs_favour_home_row(self):
		keyboard = Keyboard("ortho", rows=[4, 4, 4])
		home = [k.cost for k in keyboard.keys if k.row == 1]
		top = [k.cost for k in keyboard.keys if k.row == 0]
		assert max(home) < min(top)

	def test_distance(self, keyboard):
		assert keyboard.key(0).distance_to(keyboard.key(7)) == pytest.approx(math.sqrt(10))

	def test_dict_round_trip(self, keyboard):
		assert Keyboard.from_dict(keyboard.to_dict()) == keyboard

	@pytest.mark.parametrize("kwargs", [
		{"rows": []},
		{"rows": [3, 0]},
		{"rows": [2], "costs": [[1.0]]},
		{"rows": [2], "home_row": 3},
	])
	def test_invalid_geometry(self, kwargs):
		with pytest.raises(ConfigError):
			Keyboard("broken", **kwargs)


class TestGenerator:

	def test_whitespace_ignored(self, generator):
		assert generator.generate("abcd\nefgh") == generator.generate(BASE_LAYOUT)

	def test_wrong_length(self, generator):
		with pytest.raises(ParseError):
			generator.generate("abc")

	def test_duplicate_character(self, generator):
		with pytest.raises(ParseError):
			generator.generate("abcdefga")

	def test_shift_map(self, keyboard):
		generator = KeyboardLayoutGenerator(keyboard, shift_map={"a": "!"})
		layout = generator.generate(BASE_LAYOUT)
		assert layout.symbol_at(0, layer=1) == "!"
		assert layout.symbol_at(1, layer=1) == "B"


class TestLayout:

	def test_position_of(self, generator):
		layout = generator.generate(BASE_LAYOUT)
		key, layer = layout.position_of("G")
		assert (key.index, layer) == (6, 1)
		assert layout.position_of("z") is None
		assert "g" in layout

	def test_plot(self, generator):
		layout = generator.generate(BASE_LAYOUT)
		assert layout.plot_layer(0) == "a b c d\ne f g h"
		assert layout.plot() == "a b c d\ne f g h\n\nA B C D\nE F G H"
		with pytest.raises(ValueError):
			layout.plot_layer(2)

	def test_as_text_inverts_generate(self, generator):
		assert generator.generate("hgfe dcba").as_text() == "hgfedcba"
		assert str(generator.generate(BASE_LAYOUT)) == BASE_LAYOUT
