"""Page-level controller: owns the dashboard state and the two I/O actions.

``refresh`` reloads the whole record set; ``search`` selects an athlete and
asks for coaching feedback. Neither raises: failures become a ``Notice`` on
the published state (or fallback feedback, see ``goodsong.feedback``).
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, List, Optional

from goodsong.config import Settings
from goodsong.feedback import get_feedback
from goodsong.lookup import find_athlete, member_logs
from goodsong.mapper import IngestionError
from goodsong.models import AthleteStats, DashboardState, Notice, TrainingLog
from goodsong.sample_data import SampleSource
from goodsong.sheet_client import SheetSource
from goodsong.stats import chronological, summarize

logger = logging.getLogger(__name__)


def build_source(settings: Settings):
    if settings.demo_mode:
        return SampleSource()
    return SheetSource(settings.sheet_url, timeout=settings.http_timeout)


class Dashboard:
    def __init__(self, source, settings: Optional[Settings] = None, feedback_client: Any = None):
        self.source = source
        self.settings = settings or Settings()
        self.feedback_client = feedback_client
        self.state = DashboardState(source_label=source.label)
        self._fetch_task: Optional[asyncio.Future] = None
        self._search_generation = 0

    def _publish(self, **changes) -> None:
        # single assignment; readers never see a half-updated snapshot
        self.state = self.state.model_copy(update=changes)

    async def refresh(self) -> bool:
        """Reload every record from the source.

        A refresh started while another is in flight cancels the older fetch.
        On failure the last good record set stays and a notice is published.
        """
        if self._fetch_task is not None and not self._fetch_task.done():
            logger.info("Cancelling superseded fetch")
            self._fetch_task.cancel()
        task = asyncio.ensure_future(self.source.load())
        self._fetch_task = task
        try:
            records = await task
        except asyncio.CancelledError:
            if self._fetch_task is not task:
                return False
            raise
        except IngestionError as e:
            if self._fetch_task is not task:
                return False
            logger.warning("Training data refresh failed: %s", e)
            self._publish(notice=Notice(kind="ingestion", message=f"Could not load training data ({e})."))
            return False
        except Exception as e:
            if self._fetch_task is not task:
                return False
            logger.exception("Unexpected error while loading training data")
            self._publish(notice=Notice(kind="ingestion", message=f"Could not load training data ({e})."))
            return False

        if self._fetch_task is not task:
            return False
        self._publish(records=tuple(records), notice=None, loaded_at=datetime.now())
        return True

    async def search(self, term: str) -> bool:
        """Select the first athlete matching ``term`` and fetch their feedback.

        A miss publishes a notice and leaves the current selection alone.
        Feedback that arrives after a newer search has started is dropped.
        """
        term = (term or "").strip()
        if not term:
            return False
        records = self.state.records
        name = find_athlete(term, records)
        if name is None:
            self._publish(notice=Notice(kind="lookup", message=f"No member found matching '{term}'."))
            return False

        self._search_generation += 1
        generation = self._search_generation
        logs = chronological(member_logs(records, name))
        feedback = await get_feedback(
            name,
            logs,
            api_key=self.settings.gemini_api_key,
            client=self.feedback_client,
            model=self.settings.gemini_model,
            timeout=self.settings.feedback_timeout,
        )
        if generation != self._search_generation:
            logger.info("Discarding stale feedback for %s", name)
            return False
        self._publish(selected_member=name, feedback=feedback, notice=self._without_lookup_notice())
        return True

    def _without_lookup_notice(self) -> Optional[Notice]:
        # ingestion notices outlive searches; only a refresh clears them
        notice = self.state.notice
        return None if notice is None or notice.kind == "lookup" else notice

    def dismiss_lookup_notice(self) -> None:
        """Drop a lookup notice once it has been shown."""
        self._publish(notice=self._without_lookup_notice())

    def selected_logs(self) -> List[TrainingLog]:
        if not self.state.selected_member:
            return []
        return chronological(member_logs(self.state.records, self.state.selected_member))

    def selected_stats(self) -> Optional[AthleteStats]:
        return summarize(self.selected_logs())
