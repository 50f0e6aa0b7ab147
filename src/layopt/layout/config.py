"""
Layout configuration: keyboard geometry, base layout and shifted symbols.

Example YAML:

	keyboard:
	  name: ortho-3x10
	  rows: [10, 10, 10]
	base_layout: |
	  qwertyuiop
	  asdfghjkl;
	  zxcvbnm,./
	shift_map:
	  ";": ":"
	  ",": "<"
"""

from dataclasses import dataclass, field
from typing import Any

from layopt.core.config import YamlConfigMixin
from layopt.core.errors import ConfigError, ParseError
from layopt.layout.keyboard import Keyboard
from layopt.layout.layout import KeyboardLayoutGenerator, Layout


DEFAULT_BASE_LAYOUT = "qwertyuiop\nasdfghjkl;\nzxcvbnm,./"


def _default_keyboard() -> dict[str, Any]:
	return {"name": "ortho-3x10", "rows": [10, 10, 10]}


def _default_shift_map() -> dict[str, str]:
	return {";": ":", ",": "<", ".": ">", "/": "?"}


@dataclass
class LayoutConfig(YamlConfigMixin):
	"""Configuration of the keyboard and its base layout."""
	keyboard: dict[str, Any] = field(default_factory=_default_keyboard)
	base_layout: str = DEFAULT_BASE_LAYOUT
	shift_map: dict[str, str] = field(default_factory=_default_shift_map)

	def build_keyboard(self) -> Keyboard:
		return Keyboard.from_dict(self.keyboard)

	def build_generator(self) -> KeyboardLayoutGenerator:
		"""Keyboard layout generator; checks that the base layout fits the keyboard."""
		if not isinstance(self.shift_map, dict):
			raise ConfigError("shift_map must be a mapping of character to shifted symbol")
		generator = KeyboardLayoutGenerator(self.build_keyboard(), self.shift_map)
		try:
			generator.generate(self.base_layout)
		except ParseError as e:
			raise ConfigError(f"Base layout does not fit the keyboard: {e}") from e
		return generator

	def base(self) -> Layout:
		"""The base layout, materialized."""
		return self.build_generator().generate(self.base_layout)
