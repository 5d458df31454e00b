"""bases-bridge - query, mutate and search structured base views over a note vault."""

__version__ = "0.4.0"
