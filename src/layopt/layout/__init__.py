"""
Keyboard geometry and layouts.

Usage:
	from layopt.layout import LayoutConfig

	config = LayoutConfig.load_yaml("configs/ortho.yaml")
	generator = config.build_generator()
	layout = generator.generate(config.base_layout)
	print(layout.plot())
"""

from layopt.layout.keyboard import Keyboard, KeyPosition
from layopt.layout.layout import Layout, KeyboardLayoutGenerator, normalize_layout_text
from layopt.layout.config import LayoutConfig, DEFAULT_BASE_LAYOUT

__all__ = [
	'Keyboard',
	'KeyPosition',
	'Layout',
	'KeyboardLayoutGenerator',
	'normalize_layout_text',
	'LayoutConfig',
	'DEFAULT_BASE_LAYOUT',
]
