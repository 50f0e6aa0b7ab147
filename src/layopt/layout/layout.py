"""
Layouts and the generator that builds them from layout text.

A layout text lists the base-layer character of every key in reading order.
Whitespace is ignored, so a layout can be written one keyboard row per line:

	qwertyuiop
	asdfghjkl;
	zxcvbnm,./

Layouts are immutable; every change to an arrangement goes through the
generator and produces a new Layout.
"""

from typing import Iterator, Optional

from layopt.core.errors import ParseError
from layopt.layout.keyboard import Keyboard, KeyPosition


def normalize_layout_text(text: str) -> str:
	"""Drop all whitespace from a layout text."""
	return "".join(text.split())


class Layout:
	"""
	Materialized mapping from every key position to its layer symbols.

	Layer 0 is the base layer (the layout text itself), layer 1 the shifted
	symbols.
	"""

	def __init__(self, keyboard: Keyboard, layers: tuple[tuple[str, ...], ...]):
		self._keyboard = keyboard
		self._layers = layers
		self._positions: dict[str, tuple[KeyPosition, int]] = {}
		# Lower layers win when a symbol appears on several layers
		for layer in reversed(range(len(layers))):
			for index, symbol in enumerate(layers[layer]):
				self._positions[symbol] = (keyboard.key(index), layer)

	@property
	def keyboard(self) -> Keyboard:
		return self._keyboard

	@property
	def layers(self) -> tuple[tuple[str, ...], ...]:
		return self._layers

	@property
	def num_layers(self) -> int:
		return len(self._layers)

	def as_text(self) -> str:
		"""Flat base-layer string, the inverse of generator.generate()."""
		return "".join(self._layers[0])

	def symbol_at(self, index: int, layer: int = 0) -> str:
		return self._layers[layer][index]

	def position_of(self, symbol: str) -> Optional[tuple[KeyPosition, int]]:
		"""(key, layer) of a symbol, or None if the layout does not contain it."""
		return self._positions.get(symbol)

	def __contains__(self, symbol: str) -> bool:
		return symbol in self._positions

	def __iter__(self) -> Iterator[tuple[KeyPosition, str]]:
		"""Iterate (key, base symbol) pairs in key order."""
		return zip(self._keyboard.keys, self._layers[0])

	def plot_layer(self, layer: int = 0) -> str:
		"""Render one layer as a text grid, one keyboard row per line."""
		if not 0 <= layer < len(self._layers):
			raise ValueError(f"Layer {layer} out of range (layout has {len(self._layers)})")
		symbols = self._layers[layer]
		return "\n".join(" ".join(symbols[s]) for s in self._keyboard.row_slices())

	def plot(self) -> str:
		"""Render all layers, separated by blank lines."""
		return "\n\n".join(self.plot_layer(layer) for layer in range(len(self._layers)))

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, Layout):
			return NotImplemented
		return self._keyboard == other._keyboard and self._layers == other._layers

	def __hash__(self) -> int:
		return hash((self._keyboard, self._layers))

	def __str__(self) -> str:
		return self.as_text()

	def __repr__(self) -> str:
		return f"Layout('{self.as_text()}', keyboard={self._keyboard.name})"


class KeyboardLayoutGenerator:
	"""
	Builds layouts for one keyboard from layout text.

	Shifted symbols come from the shift map, falling back to str.upper().

	Usage:
		generator = KeyboardLayoutGenerator(keyboard, shift_map={",": "<"})
		layout = generator.generate("qwertyuiop asdfghjkl; zxcvbnm,./")
	"""

	def __init__(self, keyboard: Keyboard, shift_map: Optional[dict[str, str]] = None):
		self._keyboard = keyboard
		self._shift_map = dict(shift_map or {})

	@property
	def keyboard(self) -> Keyboard:
		return self._keyboard

	@property
	def shift_map(self) -> dict[str, str]:
		return dict(self._shift_map)

	def generate(self, text: str) -> Layout:
		"""
		Build a layout from text.

		Raises:
			ParseError: if the text does not have one character per key or
				repeats a character
		"""
		chars = normalize_layout_text(text)
		if len(chars) != self._keyboard.num_keys:
			raise ParseError(
				f"Layout '{chars}' has {len(chars)} characters, "
				f"keyboard '{self._keyboard.name}' has {self._keyboard.num_keys} keys"
			)
		seen = set()
		for c in chars:
			if c in seen:
				raise ParseError(f"Character '{c}' appears more than once in layout '{chars}'")
			seen.add(c)

		base = tuple(chars)
		shifted = tuple(self._shift_map.get(c, c.upper()) for c in chars)
		return Layout(self._keyboard, (base, shifted))

	def __repr__(self) -> str:
		return f"KeyboardLayoutGenerator(keyboard={self._keyboard!r})"
