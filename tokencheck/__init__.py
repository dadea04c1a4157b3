"""Multi-network token address validation engine."""

__version__ = "0.1.0"
