"""Transformer module for rendering sessions to various output formats."""

from .base import BaseTransformer
from .ical_transformer import ICalTransformer
from .text_transformer import TextTransformer

__all__ = ["BaseTransformer", "ICalTransformer", "TextTransformer"]
