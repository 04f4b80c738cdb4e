"""bddbrowser - browser lifecycle hooks for behave scenarios."""

__version__ = "0.1.0"
