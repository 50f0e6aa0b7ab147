"""
YAML persistence for configuration dataclasses.

Usage:
	@dataclass
	class MyParameters(YamlConfigMixin):
		population_size: int = 50

	params = MyParameters.from_yaml("population_size: 20")
	params.save_yaml("runs/params.yaml")
"""

from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Type, TypeVar

import yaml

from layopt.core.errors import ConfigError


C = TypeVar('C', bound='YamlConfigMixin')


class YamlConfigMixin:
	"""to_yaml / from_yaml for dataclasses; malformed input raises ConfigError."""

	def to_dict(self) -> dict[str, Any]:
		return asdict(self)

	def to_yaml(self) -> str:
		"""Convert config to YAML string."""
		return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

	def save_yaml(self, filepath: str) -> None:
		"""Save config to YAML file."""
		path = Path(filepath)
		path.parent.mkdir(parents=True, exist_ok=True)
		with open(path, 'w') as f:
			f.write(self.to_yaml())

	@classmethod
	def from_dict(cls: Type[C], data: Any) -> C:
		if data is None:
			data = {}
		if not isinstance(data, dict):
			raise ConfigError(f"{cls.__name__}: expected a mapping, got {type(data).__name__}")
		known = {f.name for f in fields(cls)}
		unknown = set(data) - known
		if unknown:
			raise ConfigError(f"{cls.__name__}: unknown fields {sorted(unknown)}")
		try:
			return cls(**data)
		except TypeError as e:
			raise ConfigError(f"{cls.__name__}: {e}") from e

	@classmethod
	def from_yaml(cls: Type[C], yaml_str: str) -> C:
		"""Create config from YAML string."""
		try:
			data = yaml.safe_load(yaml_str)
		except yaml.YAMLError as e:
			raise ConfigError(f"{cls.__name__}: invalid YAML: {e}") from e
		return cls.from_dict(data)

	@classmethod
	def load_yaml(cls: Type[C], filepath: str) -> C:
		"""Load config from YAML file."""
		try:
			with open(filepath, 'r') as f:
				return cls.from_yaml(f.read())
		except OSError as e:
			raise ConfigError(f"{cls.__name__}: cannot read {filepath}: {e}") from e
