"""Turn rows of the club's Google Form sheet into ``TrainingLog`` records.

The form has been edited several times, so header text drifts between
releases (suffixes get appended, questions get reworded). Columns are found
through an ordered rule list that is resolved once per CSV batch; each rule
tries exact header matches and substring markers in order.
"""
import io
import logging
import re
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

import pandas as pd

from goodsong.models import Condition, TrainingLog

logger = logging.getLogger(__name__)

DEFAULT_TRAINING_TYPE = "running"
DEFAULT_CONDITION: Condition = "Good"

CONDITION_BY_SCORE: Dict[int, Condition] = {
    5: "Excellent",
    4: "Good",
    3: "Fair",
    2: "Poor",
    1: "Poor",
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_NON_DIGITS = re.compile(r"[^0-9]")
# CPython's default int-string conversion limit; longer runs read as no data
_MAX_DIGITS = 4300


class IngestionError(RuntimeError):
    """The CSV document could not be fetched or parsed as a whole."""


class Header(NamedTuple):
    text: str
    contains: bool = False
    # consulted only when no earlier header of the rule is present
    fallback: bool = False

    def find(self, headers: Sequence[str]) -> Optional[str]:
        if self.contains:
            return next((h for h in headers if self.text in h), None)
        return self.text if self.text in headers else None


COLUMN_RULES: List[Tuple[str, List[Header]]] = [
    ("name", [Header("이름 (필수)(*)"), Header("이름")]),
    ("training_type", [Header("오늘 달린거리는?(*)")]),
    ("intensity", [Header("보강훈련 강도", contains=True), Header("intensity", fallback=True)]),
    ("heart_rate", [Header("평균 심박수", contains=True), Header("duration", fallback=True)]),
    ("timestamp", [Header("응답일시")]),
    ("condition", [Header("컨디션 체크(*)")]),
    ("notes", [Header("굿송에게 바란다."), Header("메모")]),
]


def resolve_columns(headers: Sequence[str]) -> Dict[str, Tuple[str, ...]]:
    headers = [str(h) for h in headers]
    columns = {}
    for field, candidates in COLUMN_RULES:
        found = []
        for header in candidates:
            if header.fallback and found:
                continue
            match = header.find(headers)
            if match is not None and match not in found:
                found.append(match)
        columns[field] = tuple(found)
    return columns


def parse_leading_int(value) -> Optional[int]:
    """``"7 (hard)"`` -> 7, ``"hard"`` -> None."""
    m = _LEADING_INT.match(str(value))
    if not m or len(m.group(1).lstrip("+-")) > _MAX_DIGITS:
        return None
    return int(m.group(1))


def parse_digits(value) -> int:
    """Keep digit characters only: ``"approx 150 bpm"`` -> 150, ``"n/a"`` -> 0."""
    digits = _NON_DIGITS.sub("", str(value))
    if not digits or len(digits) > _MAX_DIGITS:
        return 0
    return int(digits)


def condition_from_score(value) -> Condition:
    score = parse_leading_int(value)
    return CONDITION_BY_SCORE.get(score, DEFAULT_CONDITION)


def _first(row: Mapping, columns: Sequence[str]) -> str:
    for col in columns:
        v = row.get(col)
        if v is None or pd.isna(v):
            continue
        v = str(v)
        if v != "":
            return v
    return ""


def map_row(row: Mapping, columns: Mapping[str, Sequence[str]]) -> Optional[TrainingLog]:
    """Map one sheet row, or return None when the row has no usable name.

    Never raises: a defective row is rejected on its own and the rest of the
    batch is unaffected.
    """
    try:
        name = _first(row, columns["name"]).strip()
        if not name:
            return None
        intensity = parse_leading_int(_first(row, columns["intensity"])) or 0
        return TrainingLog(
            name=name,
            timestamp=_first(row, columns["timestamp"]).strip().split(" ", 1)[0],
            training_type=_first(row, columns["training_type"]).strip() or DEFAULT_TRAINING_TYPE,
            intensity=max(intensity, 0),
            heart_rate=parse_digits(_first(row, columns["heart_rate"])),
            notes=_first(row, columns["notes"]),
            condition=condition_from_score(_first(row, columns["condition"])),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.debug("Rejected row %r: %s", row, e)
        return None


def parse_csv(text: str) -> List[TrainingLog]:
    """Parse a whole CSV export into records, in sheet order."""
    try:
        df = pd.read_csv(
            io.StringIO(text.lstrip("\ufeff")),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines="skip",
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise IngestionError(f"CSV could not be parsed: {e}") from e

    columns = resolve_columns(list(df.columns))
    if not columns["name"]:
        logger.warning("No name column among headers %s", list(df.columns))

    records = []
    for row in df.to_dict(orient="records"):
        log = map_row(row, columns)
        if log is not None:
            records.append(log)

    dropped = len(df) - len(records)
    if dropped:
        logger.debug("Dropped %d of %d rows without a name", dropped, len(df))
    return records
