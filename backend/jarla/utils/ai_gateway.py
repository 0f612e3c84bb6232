from __future__ import annotations

import json
import re
import time
from typing import Any, Dict, List, Optional, Sequence

import requests
from flask import current_app

_FENCE_RE = re.compile(r"```(?:json)?\n?")
_EMBEDDED_JSON_RE = re.compile(r"\{[\s\S]*\"message\"[\s\S]*\}")


def _settings() -> tuple[str, str, float, float]:
    cfg = current_app.config
    return (
        (cfg.get("AI_GATEWAY_URL") or "").strip(),
        (cfg.get("AI_GATEWAY_API_KEY") or "").strip(),
        float(cfg.get("HTTP_TIMEOUT_SECONDS") or 20.0),
        float(cfg.get("AI_RETRY_DELAY_SECONDS") or 0.0),
    )


def is_configured() -> bool:
    url, key, _, _ = _settings()
    return bool(url and key)


def chat_completion(
    messages: List[Dict[str, Any]],
    model: str,
    *,
    max_tokens: Optional[int] = None,
    tools: Optional[list] = None,
    tool_choice: Optional[dict] = None,
    retries: int = 0,
) -> dict:
    """POST a chat completion to the gateway.

    429 responses wait and retry, 402 gives up at once, anything else is
    retried after half the delay. Never raises.
    """
    url, key, timeout, delay = _settings()
    if not key:
        return {"ok": False, "error": "AI_GATEWAY_API_KEY not set", "status": 500}

    headers = {"Authorization": f"Bearer {key}", "Content-Type": "application/json"}
    payload: Dict[str, Any] = {"model": model, "messages": messages}
    if max_tokens:
        payload["max_tokens"] = int(max_tokens)
    if tools:
        payload["tools"] = tools
    if tool_choice:
        payload["tool_choice"] = tool_choice

    last = {"ok": False, "error": "no attempt made", "status": 500}
    for attempt in range(retries + 1):
        try:
            r = requests.post(url, headers=headers, json=payload, timeout=timeout)
        except requests.RequestException as e:
            current_app.logger.warning("AI gateway request failed (attempt %s, %s): %s", attempt + 1, model, e)
            last = {"ok": False, "error": str(e), "status": 502}
            if attempt < retries:
                time.sleep(delay / 2)
            continue

        if 200 <= r.status_code < 300:
            try:
                return {"ok": True, "data": r.json(), "model": model}
            except ValueError:
                last = {"ok": False, "error": "invalid JSON from AI gateway", "status": 502}
                continue

        current_app.logger.warning("AI gateway error (attempt %s, %s): %s %s", attempt + 1, model, r.status_code, r.text[:300])
        if r.status_code == 402:
            return {"ok": False, "error": "payment_required", "status": 402}
        if r.status_code == 429:
            last = {"ok": False, "error": "rate_limited", "status": 429}
            if attempt < retries:
                time.sleep(delay)
            continue
        last = {"ok": False, "error": f"HTTP {r.status_code}", "status": r.status_code}
        if attempt < retries:
            time.sleep(delay / 2)
    return last


def chat_with_fallback(models: Sequence[str], messages: List[Dict[str, Any]], *, retries: int = 1, **kwargs) -> dict:
    """Try each model in turn; a 402 stops the chain."""
    result = {"ok": False, "error": "no models given", "status": 500}
    for model in models:
        result = chat_completion(messages, model, retries=retries, **kwargs)
        if result.get("ok") or result.get("error") == "payment_required":
            return result
        current_app.logger.info("model %s failed, trying next", model)
    return result


def message_content(data: dict) -> str:
    try:
        return (data.get("choices") or [{}])[0].get("message", {}).get("content") or ""
    except (AttributeError, IndexError):
        return ""


def first_tool_call(data: dict, name: str) -> Optional[dict]:
    try:
        call = (data.get("choices") or [{}])[0]["message"]["tool_calls"][0]
    except (AttributeError, IndexError, KeyError, TypeError):
        return None
    fn = call.get("function") or {}
    if fn.get("name") != name:
        return None
    try:
        args = json.loads(fn.get("arguments") or "{}")
    except ValueError:
        return None
    return args if isinstance(args, dict) else None


def parse_json_reply(text: str) -> dict:
    """Best-effort parse of a model reply that was asked to be pure JSON."""
    raw = text or ""
    cleaned = _FENCE_RE.sub("", raw).strip()
    try:
        parsed = json.loads(cleaned)
        if isinstance(parsed, dict):
            return parsed
        return {"message": raw}
    except ValueError:
        pass

    match = _EMBEDDED_JSON_RE.search(raw)
    if match:
        try:
            parsed = json.loads(match.group(0))
            if isinstance(parsed, dict):
                return parsed
        except ValueError:
            pass
    return {"message": raw}


def strip_embedded_json(message: str) -> str:
    """Drop a JSON blob the model leaked into its chat text."""
    if '"formUpdates"' not in message and '"message"' not in message:
        return message
    cleaned = re.sub(r"\{[\s\S]*\"formUpdates\"[\s\S]*\}", "", message).strip()
    return cleaned or message
