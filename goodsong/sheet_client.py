import logging
import time
from typing import List, Optional

import httpx

from goodsong.mapper import IngestionError, parse_csv
from goodsong.models import TrainingLog

logger = logging.getLogger(__name__)


async def fetch_csv(client: httpx.AsyncClient, url: str) -> str:
    # Google caches published sheets aggressively; bust it on every request.
    # Merged, not replaced: the sheet URL already carries ?output=csv.
    busted = httpx.URL(url).copy_merge_params({"t": int(time.time() * 1000)})
    try:
        r = await client.get(busted)
        r.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise IngestionError(f"sheet_http_status:{e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise IngestionError(f"sheet_http_error:{e}") from e
    return r.text


class SheetSource:
    """Published Google Sheet (CSV export) holding the club's training form answers."""

    label = "Google Sheet"

    def __init__(self, url: str, timeout: float = 15.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def load(self) -> List[TrainingLog]:
        logger.info("Fetching training sheet")
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True,
                                     transport=self._transport) as client:
            text = await fetch_csv(client, self.url)
        records = parse_csv(text)
        logger.info("Loaded %d training logs", len(records))
        return records
