"""FocusFlow — dual-budget task timer."""

__version__ = "0.1.0"
