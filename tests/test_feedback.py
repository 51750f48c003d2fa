"""
Tests for Gemini coaching feedback and its fallback.

Run with: pytest tests/test_feedback.py -v
"""

import asyncio

import httpx
import pytest

from goodsong.feedback import (
    FALLBACK_RECOMMENDATIONS,
    build_prompt,
    fallback_feedback,
    get_feedback,
)
from goodsong.models import FeedbackResult, TrainingLog

LOGS = [
    TrainingLog(name="최민지", timestamp="2024-05-25", training_type="7km", intensity=7,
                heart_rate=152, notes="언덕 반복", condition="Good"),
    TrainingLog(name="최민지", timestamp="2024-05-26", training_type="5km", intensity=0,
                heart_rate=147, notes="", condition="Fair"),
]

GOOD_PAYLOAD = {
    "aiInsight": "최민지님, 강도를 올린 날에도 심박이 안정적이에요.",
    "recommendations": ["인터벌 1회 추가", "회복주 유지", "수분 보충"],
}


def run(coro):
    return asyncio.run(coro)


class TestFallback:
    """The caller always gets renderable content."""

    def test_missing_key_returns_fallback(self):
        result = run(get_feedback("최민지", LOGS, api_key=None))
        assert isinstance(result, FeedbackResult)
        assert "최민지" in result.ai_insight
        assert len(result.recommendations) == 3

    def test_empty_key_returns_fallback(self):
        result = run(get_feedback("강종원", LOGS, api_key=""))
        assert result == fallback_feedback("강종원")

    def test_fallback_is_deterministic(self):
        assert fallback_feedback("a") == fallback_feedback("a")
        assert fallback_feedback("a").recommendations == FALLBACK_RECOMMENDATIONS

    @pytest.mark.parametrize("error", [
        RuntimeError("500 INTERNAL"),
        httpx.ConnectError("connection refused"),
        ValueError("bad request"),
    ])
    def test_service_error_returns_fallback(self, gemini_client, error):
        client = gemini_client(error=error)
        result = run(get_feedback("최민지", LOGS, client=client))
        assert result == fallback_feedback("최민지")
        assert len(client.models.calls) == 1

    @pytest.mark.parametrize("text", [
        None,
        "",
        "not json at all",
        '{"aiInsight": "only half"',
        '{"recommendations": ["a", "b", "c"]}',
        '{"aiInsight": "no recommendations"}',
        '{"aiInsight": 3, "recommendations": "nope"}',
    ])
    def test_malformed_response_returns_fallback(self, gemini_client, text):
        result = run(get_feedback("최민지", LOGS, client=gemini_client(text=text)))
        assert result == fallback_feedback("최민지")

    def test_timeout_returns_fallback(self, gemini_client):
        client = gemini_client(payload=GOOD_PAYLOAD, delays={"최민지": 1.0})
        result = run(get_feedback("최민지", LOGS, client=client, timeout=0.05))
        assert result == fallback_feedback("최민지")


class TestGeminiCall:

    def test_structured_response_parsed(self, gemini_client):
        result = run(get_feedback("최민지", LOGS, client=gemini_client(payload=GOOD_PAYLOAD)))
        assert result.ai_insight == GOOD_PAYLOAD["aiInsight"]
        assert result.recommendations == GOOD_PAYLOAD["recommendations"]

    def test_single_request_with_json_schema(self, gemini_client):
        client = gemini_client(payload=GOOD_PAYLOAD)
        run(get_feedback("최민지", LOGS, client=client, model="gemini-test"))
        assert len(client.models.calls) == 1
        call = client.models.calls[0]
        assert call["model"] == "gemini-test"
        assert call["config"].response_mime_type == "application/json"
        schema = call["config"].response_schema
        assert set(schema.properties) == {"aiInsight", "recommendations"}
        assert set(schema.required) == {"aiInsight", "recommendations"}
        assert "최민지" in call["contents"]


class TestPrompt:

    def test_one_line_per_session(self):
        prompt = build_prompt("최민지", LOGS)
        lines = [l for l in prompt.splitlines() if l.startswith("- date:")]
        assert len(lines) == 2
        assert "2024-05-25" in lines[0]
        assert "7km" in lines[0]
        assert "7/10" in lines[0]
        assert "152 BPM" in lines[0]
        assert "언덕 반복" in lines[0]
        assert "Good" in lines[0]
        assert "Fair" in lines[1]

    def test_coach_role_and_member_name(self):
        prompt = build_prompt("최민지", LOGS)
        assert "coach" in prompt.lower()
        assert "'최민지'" in prompt
