"""CSV export of the rota as currently resolved."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional

import pandas as pd

from rota.engine.schedule import ScheduleEngine

EXPORT_COLUMNS = ["date", "weekday", "shiftId", "label", "start", "end", "hours", "name", "comment"]


def schedule_frame(engine: ScheduleEngine, days: int, today: Optional[date] = None) -> pd.DataFrame:
    """One row per visible shift for `days` days from today."""
    rows = engine.rows(engine.schedule(days, today=today))
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_schedule_csv(
    engine: ScheduleEngine,
    csv_path: str | Path,
    days: int,
    today: Optional[date] = None,
) -> int:
    """
    Export the visible rota to CSV.

    Args:
        engine: ScheduleEngine over the current overrides
        csv_path: Path to output CSV
        days: Number of days from today to include

    Returns:
        Number of shift rows exported
    """
    df = schedule_frame(engine, days, today=today)
    df.to_csv(csv_path, index=False)

    print(f"[INFO] Exported {len(df)} shifts to {csv_path}")
    return len(df)
