"""
Presentation adapters for the casinojack engine.
"""

from casinojack.adapters.base import PresentationAdapter
from casinojack.adapters.cli import CLIAdapter

__all__ = ["PresentationAdapter", "CLIAdapter"]
