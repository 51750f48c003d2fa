import asyncio
import json
from types import SimpleNamespace

import pytest

SHEET_CSV = """응답일시,이름 (필수)(*),오늘 달린거리는?(*),보강훈련 강도 (1~10),평균 심박수 (BPM),컨디션 체크(*),굿송에게 바란다.
2024-05-20 07:12:01,김철수,5km,8,158,5,좋아요
2024-05-21 06:55:40,최민지,10km,7,약 150 bpm,4,
2024-05-22 07:01:10,  ,5km,5,140,3,이름 없음
2024-05-23 07:30:00,김철수,,abc,n/a,9,
2024-05-24 07:00:00,박지성,5km,6,150,4,메모,extra,extra
2024-05-25 07:10:00,Minji Park,3km,4,131,2,다리가 무거움
"""


@pytest.fixture
def sheet_csv():
    return SHEET_CSV


class FakeModels:
    """Stands in for ``client.aio.models`` of the google-genai SDK."""

    def __init__(self, text=None, error=None, delays=None):
        self.text = text
        self.error = error
        self.delays = delays or {}
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        for marker, delay in self.delays.items():
            if marker in contents:
                await asyncio.sleep(delay)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeGeminiClient:
    def __init__(self, **kwargs):
        self.models = FakeModels(**kwargs)
        self.aio = SimpleNamespace(models=self.models)


@pytest.fixture
def gemini_client():
    def make(payload=None, **kwargs):
        if payload is not None:
            kwargs["text"] = json.dumps(payload, ensure_ascii=False)
        return FakeGeminiClient(**kwargs)
    return make
