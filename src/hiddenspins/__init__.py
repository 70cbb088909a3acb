"""Hidden Spins - social discovery backend for independent artists."""

__version__ = "1.0.0"
