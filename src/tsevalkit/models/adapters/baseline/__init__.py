"""Benchmark adapters.

Closed-form benchmark methods:
- naive (last value)
- seasonal_naive (value from the same season of the last cycle)
- drift (line through the first and last observations)
- mean (historical average)
"""

from __future__ import annotations

__all__ = []
