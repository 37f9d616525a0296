"""mypa - multi-screen page driven over a cross-context tool bridge."""

__version__ = "0.3.0"
