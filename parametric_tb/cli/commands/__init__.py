"""
CLI Commands
============

All CLI commands for parametric-tb.

Commands:
  - info: Show version and component information
  - show: Build a preset model and print its summary
  - evaluate: Evaluate a preset model for given parameters
  - sweep: Repeated evaluation over a parameter range
"""

from .info import info
from .show import show
from .evaluate import evaluate
from .sweep import sweep

__all__ = [
    'info',
    'show',
    'evaluate',
    'sweep',
]
