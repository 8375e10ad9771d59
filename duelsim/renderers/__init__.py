"""Presentation layers that draw battle snapshots."""

from .text_renderer import RendererConfig, TextRenderer

__all__ = ["RendererConfig", "TextRenderer"]
