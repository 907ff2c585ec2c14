"""
Bar loading from tabular data.

Columns are matched case-insensitively; ``volume`` is optional (0.0 when
absent). The timestamp column may be named ``timestamp``, ``time``,
``datetime`` or ``date``; without one the row position is used.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from .interfaces import Bar


REQUIRED_COLUMNS = ("open", "high", "low", "close")
TIMESTAMP_COLUMNS = ("timestamp", "time", "datetime", "date")


def bars_from_dataframe(df: pd.DataFrame) -> list[Bar]:
    """
    Convert an OHLCV DataFrame into Bars, sorted by timestamp.

    Raises:
        ValueError: A required OHLC column is missing
    """
    frame = df.rename(columns={c: str(c).strip().lower() for c in df.columns})
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(
            f"Missing OHLC columns: {missing}. Got: {list(frame.columns)}\n"
            f"\n"
            f"Fix: provide open, high, low, close (and optionally volume, timestamp) columns"
        )

    ts_col = next((c for c in TIMESTAMP_COLUMNS if c in frame.columns), None)
    if ts_col is None:
        frame = frame.assign(timestamp=range(len(frame)))
        ts_col = "timestamp"
    else:
        frame = frame.assign(**{ts_col: pd.to_datetime(frame[ts_col])})
        frame = frame.sort_values(ts_col, kind="stable")

    if "volume" not in frame.columns:
        frame = frame.assign(volume=0.0)

    bars = []
    for row in frame.itertuples(index=False):
        ts = getattr(row, ts_col)
        if isinstance(ts, pd.Timestamp):
            ts = ts.to_pydatetime()
        bars.append(Bar(
            timestamp=ts,
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        ))
    return bars


def load_bars_csv(path: str | Path) -> list[Bar]:
    """
    Read bars from a CSV file.

    Raises:
        FileNotFoundError: File does not exist
        ValueError: A required OHLC column is missing
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Bar file not found: {path}")
    return bars_from_dataframe(pd.read_csv(path))
