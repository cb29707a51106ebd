from __future__ import annotations

import logging
import os
import time
from functools import lru_cache
from typing import Sequence

from openai import OpenAI

from tailorfit.core.config import settings
from tailorfit.schemas.match import PlacementPlanItem

logger = logging.getLogger(__name__)

_SECTION_LABELS = {
    "summary": "Summary",
    "experience": "Experience",
    "skills": "Skills",
}

SYSTEM_PROMPT = "You are a precise resume rewriter that follows instructions exactly."


class RewriteLLMError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def rewrite_llm_enabled() -> bool:
    if not settings.rewrite_llm_enabled:
        return False
    provider = (os.getenv("AI_PROVIDER") or "openai").strip().lower()
    if provider != "openai":
        return False
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if not api_key or _looks_like_placeholder(api_key):
        return False
    return True


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    return OpenAI(
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or None),
        timeout=settings.rewrite_timeout_s,
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "1")),
    )


def _model() -> str:
    return (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()


def _truncate(value: str, limit: int) -> str:
    text = str(value or "")
    return text[:limit] if len(text) > limit else text


def build_rewrite_prompt(document: str, requirement: str, plan_items: Sequence[PlacementPlanItem]) -> str:
    limit = settings.rewrite_max_input_chars
    keyword_lines = "\n".join(
        f"- {item.term} -> {_SECTION_LABELS.get(item.target_section, item.target_section)}" for item in plan_items
    )
    return (
        f"ROLE / JD (truncated):\n{_truncate(requirement, limit)}\n\n"
        f"KEYWORDS TO WEAVE (target section):\n{keyword_lines}\n\n"
        "INSTRUCTIONS:\n"
        "- Rewrite the resume so these keywords appear naturally and meaningfully.\n"
        "- Place terms per target section:\n"
        "  * Summary: 1-2 tight lines using 2-4 top-weight terms.\n"
        "  * Experience: add or edit bullets; each bullet uses an action verb and includes a concrete "
        "metric or a [metric] placeholder.\n"
        "  * Skills: add remaining terms to a flat list; no duplicates, no stacked variants.\n"
        "- Keep facts plausible. Do NOT invent employers, dates, or degrees. Do NOT change job titles wildly.\n"
        "- Use [verify] where a number is unknown.\n"
        "- Avoid keyword dumping. Keep total under ~900 words.\n"
        "- Output ONLY the rewritten resume text (no markdown, no commentary).\n\n"
        f"RESUME V1:\n{_truncate(document, limit)}"
    )


class OpenAIRewriter:
    """Rewrite collaborator backed by the OpenAI chat completions API."""

    def __init__(self, *, temperature: float = 0.0, max_output_tokens: int = 1800) -> None:
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    def __call__(
        self,
        document: str,
        requirement: str,
        plan_items: Sequence[PlacementPlanItem],
    ) -> str | None:
        if not rewrite_llm_enabled():
            logger.info("rewrite_llm_skipped reason=llm_disabled")
            return None

        started = time.perf_counter()
        prompt = build_rewrite_prompt(document, requirement, plan_items)
        try:
            response = _client().chat.completions.create(
                model=_model(),
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                max_tokens=self._max_output_tokens,
            )
        except Exception as exc:  # noqa: BLE001 - surfaced as a typed error for the caller's fallback
            raise RewriteLLMError(f"rewrite request failed: {exc}", code="llm_exception") from exc

        content = response.choices[0].message.content if response.choices else ""
        logger.info(
            "rewrite_llm_completed model=%s prompt_len=%s output_len=%s latency_ms=%s",
            _model(),
            len(prompt),
            len(content or ""),
            int((time.perf_counter() - started) * 1000),
        )
        return (content or "").strip()
