"""Shallow rendering: one level deep, no host."""

from .shallow_renderer import ShallowRenderer, create_renderer

__all__ = ['ShallowRenderer', 'create_renderer']
