"""
Repository Triage Layer.

Similarity ranking and confidence-decision engine for surfacing duplicate
issues and spam/low-quality contributions among open GitHub issues and
pull requests.
"""

__version__ = "0.1.0"
