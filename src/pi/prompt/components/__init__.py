"""Prompt widgets."""

from pi.prompt.components.input import Input
from pi.prompt.components.select import Select

__all__ = [
    "Input",
    "Select",
]
