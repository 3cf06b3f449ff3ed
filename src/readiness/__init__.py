"""
Strategic Readiness Platform

Adaptive assessment engine that classifies respondents into strategic
readiness personas across five assessment modalities.
"""

__version__ = "0.1.0"
