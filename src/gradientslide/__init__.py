"""Interactive gradient descent / ascent on typeset two-variable surfaces."""

__version__ = "0.1.0"
