# adoption_risk/__init__.py
"""Risk scoring, classification and monitoring core for AI-adoption planning."""

__version__ = "0.3.0"
