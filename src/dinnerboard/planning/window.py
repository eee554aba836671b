"""Rolling planning window shared by the grocery aggregator and suggestion scorer."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from dinnerboard.models.grocery import PlanningWindow

WINDOW_DAYS = 7


def compute_window(now: Optional[datetime] = None) -> PlanningWindow:
    """Return today through today + 6 days, with today taken at local midnight."""

    current = now or datetime.now()
    start = current.date()
    return PlanningWindow(start=start, end=start + timedelta(days=WINDOW_DAYS - 1))


__all__ = ["WINDOW_DAYS", "compute_window"]
