"""Core registry modules."""
