"""Coaching feedback from Gemini.

``get_feedback`` always returns a ``FeedbackResult``: when the key is
missing or the call fails in any way, the athlete gets fixed fallback
content instead of an error.
"""
import asyncio
import logging
from typing import Any, Optional, Sequence

from google import genai
from google.genai import types as genai_types

from goodsong.config import GEMINI_MODEL_DEFAULT
from goodsong.models import FeedbackResult, TrainingLog

logger = logging.getLogger(__name__)

CLUB_NAME = "Good morning song-do (굿모닝송도)"

RESPONSE_SCHEMA = genai_types.Schema(
    type=genai_types.Type.OBJECT,
    properties={
        "aiInsight": genai_types.Schema(
            type=genai_types.Type.STRING,
            description="Coach's analysis of the training data and a word of encouragement",
        ),
        "recommendations": genai_types.Schema(
            type=genai_types.Type.ARRAY,
            items=genai_types.Schema(type=genai_types.Type.STRING),
            description="Three concrete actions for the coming sessions",
        ),
    },
    required=["aiInsight", "recommendations"],
)

FALLBACK_RECOMMENDATIONS = [
    "일정한 훈련 빈도를 유지해 심폐 지구력 키우기",
    "훈련 전후 15분 이상 동적/정적 스트레칭하기",
    "컨디션이 낮은 날은 회복주 위주로 가볍게 달리기",
]


def fallback_feedback(name: str) -> FeedbackResult:
    return FeedbackResult(
        ai_insight=(
            f"{name}님, 최근 훈련 기록을 꼼꼼히 살펴보고 있어요. "
            "꾸준한 페이스를 잘 이어가고 계시니, 더 자세한 분석은 곧 전해드릴게요!"
        ),
        recommendations=list(FALLBACK_RECOMMENDATIONS),
    )


def format_log_line(log: TrainingLog) -> str:
    return (
        f"- date: {log.timestamp or 'unknown'}, activity: {log.training_type}, "
        f"intensity: {log.intensity}/10, avg heart rate: {log.heart_rate} BPM, "
        f"notes: {log.notes or '-'}, condition: {log.condition}"
    )


def build_prompt(name: str, logs: Sequence[TrainingLog]) -> str:
    summary = "\n".join(format_log_line(l) for l in logs)
    return f"""You are the head running coach and data analyst of the {CLUB_NAME} running club.
Write a specific, professional performance report for member '{name}' based on their recent training logs.

Guidelines:
1. Look for patterns rather than listing entries: how heart rate responds when intensity goes up, whether the notes match the condition scores.
2. aiInsight: one paragraph. Open by addressing the member by name, warmly. Point out concrete observations from the data and include real coaching advice. You are the coach speaking to the member, never the other way round.
3. "avg heart rate" is a measure of training load, not a duration in minutes; 0 means it was not recorded.
4. recommendations: exactly 3 concrete actions the member can start tomorrow.
5. Write everything in Korean, in a professional but warm tone.

Training logs:
{summary}"""


def make_client(api_key: str, timeout: float) -> Any:
    return genai.Client(
        api_key=api_key,
        http_options=genai_types.HttpOptions(timeout=int(timeout * 1000)),
    )


async def get_feedback(
    name: str,
    logs: Sequence[TrainingLog],
    *,
    api_key: Optional[str] = None,
    client: Any = None,
    model: str = GEMINI_MODEL_DEFAULT,
    timeout: float = 60.0,
) -> FeedbackResult:
    """Ask Gemini for an insight paragraph and three recommendations.

    Exactly one attempt, no retries. ``client`` may be passed in (tests,
    shared client); otherwise one is built from ``api_key``.
    """
    if client is None and not api_key:
        logger.warning("No Gemini API key configured; using fallback feedback for %s", name)
        return fallback_feedback(name)

    try:
        if client is None:
            client = make_client(api_key, timeout)
        config = genai_types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
            temperature=0.7,
        )
        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=model,
                contents=build_prompt(name, logs),
                config=config,
            ),
            timeout=timeout,
        )
        result = FeedbackResult.model_validate_json(response.text or "")
    except Exception as e:
        logger.warning("Gemini feedback failed for %s: %s", name, e)
        return fallback_feedback(name)

    logger.info("Gemini feedback for %s: %d recommendations", name, len(result.recommendations))
    return result
