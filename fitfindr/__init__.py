"""FitFindr: directory and events backend for fitness locations."""

__version__ = "0.1.0"
