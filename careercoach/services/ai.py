"""
AI: OpenAI-совместимый chat completions API через httpx.

Две операции: улучшить текст записи резюме и сгенерировать инсайты по индустрии.
Любой сбой (нет ключа, HTTP ошибка, пустой/кривой ответ) → ExternalServiceError.
"""
import json
import logging
import re

import httpx
from pydantic import ValidationError

from careercoach.core.config import settings
from careercoach.resume.errors import ExternalServiceError
from careercoach.schemas.insight import IndustryInsightData

logger = logging.getLogger(__name__)

SERVICE = "ai"


def _assert_configured() -> None:
    if not (settings.AI_API_KEY or "").strip():
        raise ExternalServiceError(SERVICE, "AI_API_KEY is not set")


async def chat_completion(
    messages: list[dict],
    *,
    temperature: float = 0.3,
    json_mode: bool = False,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Один запрос к /chat/completions, вернуть content первого choice."""
    _assert_configured()

    payload: dict = {
        "model": settings.AI_MODEL,
        "messages": messages,
        "temperature": temperature,
    }
    if json_mode:
        payload["response_format"] = {"type": "json_object"}
    url = settings.AI_BASE_URL.rstrip("/") + "/chat/completions"
    headers = {
        "Authorization": f"Bearer {settings.AI_API_KEY}",
        "Accept": "application/json",
    }

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.AI_TIMEOUT_SECONDS)
    try:
        response = await client.post(url, json=payload, headers=headers)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        logger.warning("AI API error %s: %s", e.response.status_code, e.response.text[:200])
        raise ExternalServiceError(SERVICE, f"AI API error {e.response.status_code}") from e
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("AI request failed: %s", e)
        raise ExternalServiceError(SERVICE, f"AI request failed: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    choices = data.get("choices") or []
    content = ((choices[0] or {}).get("message") or {}).get("content") if choices else None
    if not (content or "").strip():
        raise ExternalServiceError(SERVICE, "AI returned an empty answer")
    return content.strip()


def extract_first_json_object(text: str) -> str:
    """Вытащить первый {...} из ответа модели (с markdown-обёрткой или без)."""
    t = (text or "").strip()
    t = re.sub(r"^```(?:json)?\s*", "", t, flags=re.IGNORECASE).strip()
    t = re.sub(r"\s*```$", "", t).strip()
    if t.startswith("{") and t.endswith("}"):
        return t

    start = t.find("{")
    if start < 0:
        return "{}"
    depth = 0
    for i in range(start, len(t)):
        if t[i] == "{":
            depth += 1
        elif t[i] == "}":
            depth -= 1
            if depth == 0:
                return t[start : i + 1]
    return "{}"


async def improve_text(current: str, section_type: str, industry: str | None = None) -> str:
    """Переписать описание записи резюме. Исходный текст вызывающего не трогаем."""
    who = f"a {industry} professional" if industry else "a professional"
    prompt = (
        f"As an expert resume writer, improve the following {section_type} description for {who}.\n"
        "Make it more impactful, quantifiable, and aligned with industry standards.\n"
        f'Current content: "{current}"\n\n'
        "Requirements:\n"
        "1. Use action verbs\n"
        "2. Include metrics and results where possible\n"
        "3. Highlight relevant technical skills\n"
        "4. Keep it concise but detailed\n"
        "5. Focus on achievements over responsibilities\n"
        "6. Keep one bullet per line, without bullet characters\n\n"
        "Format the response as plain text without any additional text or explanations."
    )
    return await chat_completion([{"role": "user", "content": prompt}], temperature=0.4)


async def generate_industry_insights(industry: str) -> IndustryInsightData:
    """Сгенерировать инсайты по индустрии и проверить форму ответа."""
    prompt = (
        f"Analyze the current state of the {industry} industry and provide insights in ONLY the "
        "following JSON format without any additional notes or explanations:\n"
        "{\n"
        '  "salary_ranges": [{"role": string, "min": number, "max": number, "median": number, "location": string}],\n'
        '  "growth_rate": number,\n'
        '  "demand_level": "High" | "Medium" | "Low",\n'
        '  "top_skills": [string],\n'
        '  "market_outlook": "Positive" | "Neutral" | "Negative",\n'
        '  "key_trends": [string],\n'
        '  "recommended_skills": [string]\n'
        "}\n\n"
        "Include at least 5 common roles for salary ranges. Growth rate should be a percentage. "
        "Include at least 5 skills and trends."
    )
    content = await chat_completion(
        [{"role": "user", "content": prompt}],
        temperature=0.2,
        json_mode=True,
    )
    try:
        return IndustryInsightData.model_validate(json.loads(extract_first_json_object(content)))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("AI returned malformed insights for %s: %s", industry, e)
        raise ExternalServiceError(SERVICE, "AI returned malformed industry insights") from e
