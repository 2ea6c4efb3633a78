"""guardtype — constrained-value type generator."""

__version__ = "0.1.0"
