"""
Progress Chart Service.

Merges five daily metric logs into date-keyed chart records and renders
them as a multi-series, gap-aware time chart with pointer tooltips.
"""

__version__ = "1.0.0"
