# src/mdxtr/llm.py
"""
LLM client utilities.

Purpose:
- Centralize all interactions with the OpenAI-compatible API.
- Provide a small async primitive (chat_json) for JSON-only LLM calls.
- Add observability (latency + token usage) for cost/debugging.

Design choices:
- The client is async so several target languages can be in flight at once
  while the rest of the pipeline stays single-threaded.
- JSON parsing + fence stripping to make downstream logic deterministic.
- Logging includes operation + run_id to correlate calls across a run.
"""
from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from mdxtr.settings import Settings

# Dedicated logger namespace so LLM telemetry can be filtered independently.
logger = logging.getLogger("mdxtr.llm")

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class LLMError(RuntimeError):
    pass


def get_client(settings: Settings) -> AsyncOpenAI:
    # base_url=None lets the SDK use its default endpoint (or OPENAI_BASE_URL).
    return AsyncOpenAI(api_key=settings.api_key, base_url=settings.base_url)


def _safe_usage_dict(usage: Any) -> Optional[Dict[str, int]]:
    """
    Normalize a usage object (OpenAI types or dict-like) into a stable dict.
    """
    if usage is None:
        return None
    if all(hasattr(usage, a) for a in ("prompt_tokens", "completion_tokens", "total_tokens")):
        return {
            "prompt_tokens": int(usage.prompt_tokens or 0),
            "completion_tokens": int(usage.completion_tokens or 0),
            "total_tokens": int(usage.total_tokens or 0),
        }
    if isinstance(usage, dict):
        try:
            return {
                "prompt_tokens": int(usage.get("prompt_tokens", 0)),
                "completion_tokens": int(usage.get("completion_tokens", 0)),
                "total_tokens": int(usage.get("total_tokens", 0)),
            }
        except (TypeError, ValueError):
            return None
    return None


def parse_json_text(txt: str) -> Any:
    """
    Parse model output as JSON.
    Some models wrap JSON in ```json fences even when asked not to; in that case
    the first fenced block is parsed instead.
    """
    try:
        return json.loads(txt)
    except json.JSONDecodeError:
        m = _FENCE_RE.search(txt)
        if not m:
            raise LLMError("Model response is not valid JSON.") from None
        try:
            return json.loads(m.group(1).strip())
        except json.JSONDecodeError as e:
            raise LLMError(f"Fenced model response is not valid JSON: {e}") from e


async def chat_json(
    client: AsyncOpenAI,
    model: str,
    system: str,
    user: str,
    temperature: Optional[float] = None,
    operation: str = "unspecified",
    run_id: Optional[str] = None,
) -> Any:
    """
    Call the LLM and parse a JSON response.

    Contract:
    - The caller MUST instruct the model to return JSON only.
    - Raises LLMError on an empty or unparsable response (fail fast).
    """
    kwargs: Dict[str, Any] = {}
    if temperature is not None:
        kwargs["temperature"] = temperature

    t0 = time.perf_counter()

    resp = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        response_format={"type": "json_object"},
        **kwargs,
    )

    dt_ms = (time.perf_counter() - t0) * 1000.0
    usage = _safe_usage_dict(getattr(resp, "usage", None))

    logger.info(
        "llm_call op=%s model=%s latency_ms=%.1f run_id=%s usage=%s",
        operation,
        model,
        dt_ms,
        run_id,
        usage,
    )

    txt = (resp.choices[0].message.content or "").strip()
    if not txt:
        raise LLMError("Empty model response.")
    return parse_json_text(txt)
