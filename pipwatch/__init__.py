"""pipwatch: hourly FX signals and the P&L of following them.

Pipeline: prices -> indicators -> strategy signals -> {scoring, position replay}.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "1.0.0"
