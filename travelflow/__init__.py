"""Travel Flow - Organize flight and hotel confirmations into browsable trips."""

__version__ = "0.1.0"
