"""
Core errors and enums for layopt.

This module contains the exception taxonomy and the state enums shared by
the optimizers.
"""

from layopt.core.errors import (
	LayoutOptimizationError,
	ConfigError,
	InvalidParameterError,
	ParseError,
	InvalidPermutationError,
	EvaluationError,
	AlreadyTerminatedError,
)
from layopt.core.config import YamlConfigMixin
from layopt.core.states import (
	OptimizerState,
	StepKind,
	StopReason,
	CoolingSchedule,
)

__all__ = [
	# Errors
	'LayoutOptimizationError',
	'ConfigError',
	'InvalidParameterError',
	'ParseError',
	'InvalidPermutationError',
	'EvaluationError',
	'AlreadyTerminatedError',
	# States
	'OptimizerState',
	'StepKind',
	'StopReason',
	'CoolingSchedule',
	# Config
	'YamlConfigMixin',
]
