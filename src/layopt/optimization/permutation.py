"""
Permutation view of a layout.

Optimizers do not manipulate layouts. They manipulate permutations: tuples
of indices into the ordered list of movable characters ("slots"). Slot i is
the i-th key position of the base layout that holds a movable character; a
permutation p puts movable character p[i] on slot i. Fixed characters keep
their base-layout key in every generated layout.

	base layout   "abcdef", fixed "c"
	slots         positions 0 1 3 4 5 holding a b d e f
	permutation   (1, 0, 2, 3, 4)  ->  "bacdef"
"""

import random
from typing import Sequence, Union

from layopt.core.errors import ConfigError, InvalidPermutationError, ParseError
from layopt.layout.layout import KeyboardLayoutGenerator, Layout, normalize_layout_text


Permutation = tuple[int, ...]


def is_valid_permutation(permutation: Sequence[int], size: int) -> bool:
	"""True if permutation is a bijection over range(size)."""
	return len(permutation) == size and sorted(permutation) == list(range(size))


class PermutationLayoutGenerator:
	"""
	Maps permutations to layouts and layout text back to permutations.

	Usage:
		plg = PermutationLayoutGenerator("qwertyuiop...", ",.", layout_generator)
		perm = plg.permutation_for("qwertyuiop...")  # identity
		layout = plg.generate_layout(perm)
		text = plg.generate_string(plg.random_permutation(rng))
	"""

	def __init__(
		self,
		base_layout: str,
		fixed_characters: str,
		layout_generator: KeyboardLayoutGenerator,
		movable_characters: str | None = None,
	):
		"""
		Args:
			base_layout: Starting layout text; fixes which key each character
				starts on and where fixed characters stay
			fixed_characters: Characters excluded from the search
			layout_generator: Generator that materializes full layouts
			movable_characters: Explicit slot characters. Defaults to every
				base layout character that is not fixed. When given, fixed
				and movable characters must partition the base layout.

		Raises:
			ConfigError: if the characters do not partition the base layout
		"""
		base = normalize_layout_text(base_layout)
		fixed = normalize_layout_text(fixed_characters)

		duplicates = sorted({c for c in base if base.count(c) > 1})
		if duplicates:
			raise ConfigError(f"Base layout repeats characters: {''.join(duplicates)!r}")
		if len(set(fixed)) != len(fixed):
			raise ConfigError(f"Fixed characters repeat: {fixed!r}")
		unknown_fixed = [c for c in fixed if c not in base]
		if unknown_fixed:
			raise ConfigError(f"Fixed characters not in base layout: {''.join(unknown_fixed)!r}")

		fixed_set = set(fixed)
		if movable_characters is None:
			movable_set = {c for c in base if c not in fixed_set}
		else:
			movable = normalize_layout_text(movable_characters)
			if len(set(movable)) != len(movable):
				raise ConfigError(f"Movable characters repeat: {movable!r}")
			movable_set = set(movable)
			both = sorted(movable_set & fixed_set)
			if both:
				raise ConfigError(f"Characters both fixed and movable: {''.join(both)!r}")
			if movable_set | fixed_set != set(base):
				unaccounted = sorted(set(base) - movable_set - fixed_set)
				foreign = sorted(movable_set - set(base))
				raise ConfigError(
					f"Fixed and movable characters do not partition the base layout "
					f"(unaccounted: {''.join(unaccounted)!r}, not in layout: {''.join(foreign)!r})"
				)

		try:
			layout_generator.generate(base)
		except ParseError as e:
			raise ConfigError(f"Base layout rejected by the layout generator: {e}") from e

		self._base = base
		self._fixed = fixed
		self._layout_generator = layout_generator
		self._slot_positions = tuple(i for i, c in enumerate(base) if c in movable_set)
		self._slot_characters = tuple(base[i] for i in self._slot_positions)
		self._slot_index = {c: i for i, c in enumerate(self._slot_characters)}

	@property
	def base_text(self) -> str:
		return self._base

	@property
	def fixed_characters(self) -> str:
		return self._fixed

	@property
	def slot_characters(self) -> tuple[str, ...]:
		return self._slot_characters

	@property
	def slot_positions(self) -> tuple[int, ...]:
		return self._slot_positions

	@property
	def num_slots(self) -> int:
		return len(self._slot_positions)

	@property
	def layout_generator(self) -> KeyboardLayoutGenerator:
		return self._layout_generator

	@property
	def signature(self) -> tuple:
		"""What a permutation means: the base text, the slot characters and the keyboard."""
		return (
			self._base,
			self._slot_characters,
			self._layout_generator.keyboard,
			tuple(sorted(self._layout_generator.shift_map.items())),
		)

	def identity(self) -> Permutation:
		"""The permutation of the base layout itself."""
		return tuple(range(self.num_slots))

	def random_permutation(self, rng: random.Random) -> Permutation:
		perm = list(range(self.num_slots))
		rng.shuffle(perm)
		return tuple(perm)

	def validate(self, permutation: Sequence[int]) -> None:
		"""
		Raises:
			InvalidPermutationError: unless permutation is a bijection over the slots
		"""
		if not is_valid_permutation(permutation, self.num_slots):
			raise InvalidPermutationError(
				f"Expected a permutation of {self.num_slots} slots, got {tuple(permutation)}"
			)

	def generate_string(self, permutation: Sequence[int]) -> str:
		"""Flat layout text for a permutation."""
		self.validate(permutation)
		chars = list(self._base)
		for slot, index in zip(self._slot_positions, permutation):
			chars[slot] = self._slot_characters[index]
		return "".join(chars)

	def generate_layout(self, permutation: Sequence[int]) -> Layout:
		"""A freshly materialized layout for a permutation."""
		return self._layout_generator.generate(self.generate_string(permutation))

	def permutation_for(self, layout: Union[str, Layout]) -> Permutation:
		"""
		The permutation that produces the given arrangement.

		Raises:
			ParseError: if the text moves a fixed character or does not
				rearrange exactly the movable characters
		"""
		text = layout.as_text() if isinstance(layout, Layout) else normalize_layout_text(layout)
		if len(text) != len(self._base):
			raise ParseError(f"Layout '{text}' has {len(text)} characters, expected {len(self._base)}")

		slot_set = set(self._slot_positions)
		for i, c in enumerate(self._base):
			if i not in slot_set and text[i] != c:
				raise ParseError(f"Fixed character '{c}' must stay at position {i}, found '{text[i]}'")

		permutation = []
		for slot in self._slot_positions:
			c = text[slot]
			if c not in self._slot_index:
				raise ParseError(f"Character '{c}' at position {slot} is not a movable character")
			permutation.append(self._slot_index[c])
		if len(set(permutation)) != len(permutation):
			raise ParseError(f"Layout '{text}' repeats a movable character")
		return tuple(permutation)

	def __repr__(self) -> str:
		return (
			f"PermutationLayoutGenerator(base='{self._base}', "
			f"fixed='{self._fixed}', slots={self.num_slots})"
		)
