"""CardFlow: fill template documents from tabular records."""

__version__ = "0.1.0"
