from typing import List, Optional, Sequence

from goodsong.models import TrainingLog


def find_athlete(term: str, records: Sequence[TrainingLog]) -> Optional[str]:
    """Name of the first record (sheet order) containing ``term``, ignoring case."""
    needle = (term or "").strip().lower()
    if not needle:
        return None
    for log in records:
        if needle in log.name.lower():
            return log.name
    return None


def member_logs(records: Sequence[TrainingLog], name: str) -> List[TrainingLog]:
    return [log for log in records if log.name == name]
