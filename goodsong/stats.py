import math
from typing import List, Optional, Sequence

import pandas as pd

from goodsong.models import AthleteStats, TrainingLog


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def summarize(logs: Sequence[TrainingLog]) -> Optional[AthleteStats]:
    """Session count plus averages over the sessions that report a value.

    Zero heart rate / intensity means "not reported" and is left out of the
    averages; an average with nothing to average is None, not 0.
    """
    if not logs:
        return None
    hr = [l.heart_rate for l in logs if l.heart_rate > 0]
    intensity = [l.intensity for l in logs if l.intensity > 0]
    return AthleteStats(
        count=len(logs),
        avg_heart_rate=_round_half_up(sum(hr) / len(hr)) if hr else None,
        avg_intensity=f"{sum(intensity) / len(intensity):.1f}" if intensity else None,
    )


def chronological(logs: Sequence[TrainingLog]) -> List[TrainingLog]:
    # undated sessions go last, keeping sheet order
    def key(item):
        i, log = item
        ts = pd.to_datetime(log.timestamp, errors="coerce") if log.timestamp else pd.NaT
        if pd.isna(ts):
            return (1, 0, i)
        return (0, ts.value, i)
    return [log for _, log in sorted(enumerate(logs), key=key)]


def heart_rate_frame(logs: Sequence[TrainingLog]) -> pd.DataFrame:
    rows = [{"date": l.timestamp, "heart_rate": l.heart_rate}
            for l in chronological(logs) if l.heart_rate > 0]
    return pd.DataFrame(rows, columns=["date", "heart_rate"])


def history_frame(logs: Sequence[TrainingLog]) -> pd.DataFrame:
    rows = []
    for l in reversed(chronological(logs)):
        rows.append({
            "Date": l.timestamp,
            "Activity": l.training_type,
            "Intensity": l.intensity or None,
            "BPM": l.heart_rate or None,
            "Condition": l.condition,
            "Notes": l.notes,
        })
    return pd.DataFrame(rows, columns=["Date", "Activity", "Intensity", "BPM", "Condition", "Notes"])
