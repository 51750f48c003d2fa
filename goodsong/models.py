from datetime import datetime
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

Condition = Literal["Excellent", "Good", "Fair", "Poor"]


class TrainingLog(BaseModel):
    """One attended session for one athlete, as submitted through the club form."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    timestamp: str = ""
    training_type: str = "running"
    intensity: int = 0        # 1-10, 0 = no data
    heart_rate: int = 0       # average BPM, 0 = no data
    notes: str = ""
    condition: Condition = "Good"


class AthleteStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    avg_heart_rate: Optional[int] = None
    avg_intensity: Optional[str] = None


class FeedbackResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ai_insight: str = Field(alias="aiInsight")
    recommendations: List[str]


class Notice(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["ingestion", "lookup"]
    message: str


class DashboardState(BaseModel):
    """Snapshot of everything the page renders.

    Never mutated in place: the controller publishes a new snapshot, so a
    reader holds either the old or the new record set, never a mixture.
    """
    model_config = ConfigDict(frozen=True)

    records: Tuple[TrainingLog, ...] = ()
    selected_member: Optional[str] = None
    feedback: Optional[FeedbackResult] = None
    notice: Optional[Notice] = None
    loaded_at: Optional[datetime] = None
    source_label: str = ""
