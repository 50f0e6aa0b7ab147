"""
Keyboard geometry: the key positions a layout assigns characters to.

Keys are numbered in reading order (row by row, left to right). Each key
carries a base typing cost used by the reference cost metrics.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from layopt.core.errors import ConfigError


@dataclass(frozen=True)
class KeyPosition:
	"""A physical key: flat index, grid coordinates and base cost."""
	index: int
	row: int
	col: int
	cost: float

	def distance_to(self, other: 'KeyPosition') -> float:
		return math.hypot(self.row - other.row, self.col - other.col)


class Keyboard:
	"""
	A grid of keys described by the number of keys per row.

	Costs can be given per key; otherwise they are derived from the distance
	to the home row, plus a small penalty for the inner columns, so that the
	outer home-row keys are cheapest.

	Usage:
		keyboard = Keyboard("ortho-3x10", rows=[10, 10, 10])
		keyboard.num_keys  # 30
		keyboard.key(11).row  # 1
	"""

	def __init__(
		self,
		name: str,
		rows: list[int],
		costs: Optional[list[list[float]]] = None,
		home_row: Optional[int] = None,
	):
		if not rows or any(n <= 0 for n in rows):
			raise ConfigError(f"Keyboard '{name}' needs at least one row and positive row lengths, got {rows}")
		if costs is not None:
			if len(costs) != len(rows) or any(len(c) != n for c, n in zip(costs, rows)):
				raise ConfigError(f"Keyboard '{name}': costs shape does not match rows {rows}")

		self.name = name
		self._rows = list(rows)
		self._home_row = home_row if home_row is not None else len(rows) // 2
		if not 0 <= self._home_row < len(rows):
			raise ConfigError(f"Keyboard '{name}': home_row {self._home_row} out of range")

		keys = []
		for r, length in enumerate(rows):
			for c in range(length):
				cost = float(costs[r][c]) if costs is not None else self._default_cost(r, c, length)
				keys.append(KeyPosition(index=len(keys), row=r, col=c, cost=cost))
		self._keys = tuple(keys)

	def _default_cost(self, row: int, col: int, row_length: int) -> float:
		# Inner columns pay a small lateral-stretch penalty
		half = row_length / 2
		from_centre = abs((col + 0.5) - half) / half if half else 0.0
		return round(1.0 + abs(row - self._home_row) + 0.5 * (1.0 - from_centre) ** 2, 4)

	@property
	def rows(self) -> list[int]:
		return list(self._rows)

	@property
	def num_keys(self) -> int:
		return len(self._keys)

	@property
	def keys(self) -> tuple[KeyPosition, ...]:
		return self._keys

	@property
	def home_row(self) -> int:
		return self._home_row

	def key(self, index: int) -> KeyPosition:
		return self._keys[index]

	def row_slices(self) -> list[slice]:
		"""Flat-index slices of each row, in order."""
		slices = []
		start = 0
		for length in self._rows:
			slices.append(slice(start, start + length))
			start += length
		return slices

	def to_dict(self) -> dict[str, Any]:
		"""Serialize to a plain dict (costs included)."""
		costs = [[self._keys[i].cost for i in range(s.start, s.stop)] for s in self.row_slices()]
		return {
			"name": self.name,
			"rows": self.rows,
			"costs": costs,
			"home_row": self._home_row,
		}

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> 'Keyboard':
		"""Build a keyboard from a config mapping (rows required)."""
		if not isinstance(data, dict) or "rows" not in data:
			raise ConfigError("Keyboard config must be a mapping with a 'rows' list")
		unknown = set(data) - {"name", "rows", "costs", "home_row"}
		if unknown:
			raise ConfigError(f"Unknown keyboard config keys: {sorted(unknown)}")
		return cls(
			name=data.get("name", "keyboard"),
			rows=list(data["rows"]),
			costs=data.get("costs"),
			home_row=data.get("home_row"),
		)

	def __eq__(self, other: Any) -> bool:
		if not isinstance(other, Keyboard):
			return NotImplemented
		return self.name == other.name and self._keys == other._keys

	def __hash__(self) -> int:
		return hash((self.name, self._keys))

	def __repr__(self) -> str:
		return f"Keyboard(name='{self.name}', rows={self._rows})"
