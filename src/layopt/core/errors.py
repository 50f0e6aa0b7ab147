"""
Exception hierarchy for layout optimization.

All errors raised by layopt derive from LayoutOptimizationError, so callers
can catch the whole family at once. Configuration and parse errors are also
ValueErrors, matching how malformed input is reported elsewhere in Python.

Usage:
	from layopt.core.errors import ConfigError, ParseError

	try:
		generator = PermutationLayoutGenerator(layout_str, fixed, base)
	except ConfigError as e:
		print(f"Bad layout configuration: {e}")
"""


class LayoutOptimizationError(Exception):
	"""Base class for all layopt errors."""


class ConfigError(LayoutOptimizationError, ValueError):
	"""Malformed layout, evaluation or optimization configuration."""


class InvalidParameterError(ConfigError):
	"""An optimization parameter that cannot be corrected to a usable value."""


class ParseError(LayoutOptimizationError, ValueError):
	"""Malformed textual input: layout text or n-gram frequency lines."""


class InvalidPermutationError(LayoutOptimizationError):
	"""
	A permutation with the wrong length, duplicates or out-of-range indices.

	Optimizers only ever produce valid permutations, so this signals a bug in
	the caller or in a custom operator. It is never turned into a Failed
	step outcome.
	"""


class EvaluationError(LayoutOptimizationError):
	"""The evaluator could not score a layout."""


class AlreadyTerminatedError(LayoutOptimizationError, RuntimeError):
	"""step() was called on a genetic optimizer that already finished or failed."""
