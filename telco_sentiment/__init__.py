"""Sentiment and emotion analysis of Italian telco customer reviews."""

__version__ = "1.0.0"

from .loader import load_resources, load_reviews
from .pipeline import analysis_pipeline
from .reporting import print_report

__all__ = [
    "analysis_pipeline",
    "load_resources",
    "load_reviews",
    "print_report",
]
