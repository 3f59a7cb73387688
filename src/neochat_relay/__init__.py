"""NeoChat Relay: store-and-forward relay for end-to-end encrypted envelopes."""

__version__ = "1.1.0"

__all__ = ["__version__"]
