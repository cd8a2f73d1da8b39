# clients/universal_client.py
import json
import logging
import os
import re

import requests

from moodmixer.errors import LLMError
from moodmixer.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

DEFAULTS = {
    "openai_base": "https://openrouter.ai/api/v1/chat/completions",
    "gemini_base_root": "https://generativelanguage.googleapis.com/v1beta/models",
    "openai_model": "gpt-4o-mini",
    "gemini_model": "gemini-2.0-flash",
}

rate_limiter = RateLimiter(rpm=10)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def configure_rate_limiter(rpm=10, daily_limit=None):
    global rate_limiter
    rate_limiter = RateLimiter(rpm=rpm, daily_limit=daily_limit)
    return rate_limiter


def _guess_provider_from_key(key: str) -> str:
    if not key: return "mock"
    if key.startswith("AIza"): return "gemini"
    return "openai"


def _detect(provider_env=None):
    key = os.getenv("LLM_API_KEY", "")
    provider = provider_env or os.getenv("LLM_PROVIDER", "auto")
    if provider == "auto":
        provider = _guess_provider_from_key(key)
    return provider, key


def _headers_common(key, extra=None):
    h = {"Content-Type": "application/json"}
    if key and not key.startswith("AIza"):
        h["Authorization"] = f"Bearer {key}"
    if extra:
        h.update(extra)
    return h


def _post(url, data, headers):
    try:
        r = requests.post(url, json=data, headers=headers, timeout=60)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as e:
        raise LLMError(f"LLM request failed: {e}") from e
    except ValueError as e:
        raise LLMError("LLM response was not JSON") from e


def call_llm(prompt, system=None, temperature=0.7, max_tokens=900, json_mode=False):
    provider, key = _detect()
    if provider == "mock" or not key:
        raise LLMError("LLM_API_KEY is not set")
    base_url = os.getenv("LLM_BASE_URL", "").strip()

    rate_limiter.wait()

    if provider == "gemini":
        parts = []
        if system: parts.append(f"[SYSTEM]\n{system}")
        parts.append(prompt)
        model = os.getenv("GEMINI_MODEL", DEFAULTS["gemini_model"])
        url = base_url or f"{DEFAULTS['gemini_base_root']}/{model}:generateContent?key={key}"
        data = {
            "contents": [{"parts": [{"text": "\n\n".join(parts)}]}],
            "generationConfig": {"temperature": temperature, "maxOutputTokens": max_tokens},
        }
        if json_mode:
            data["generationConfig"]["responseMimeType"] = "application/json"
        js = _post(url, data, _headers_common(None))
        try:
            return js["candidates"][0]["content"]["parts"][0]["text"].strip()
        except (KeyError, IndexError, TypeError) as e:
            raise LLMError("No text in Gemini response") from e

    # Default: OpenAI-compatible
    data = {
        "model": os.getenv("OPENAI_MODEL", DEFAULTS["openai_model"]),
        "messages": (
            ([{"role": "system", "content": system}] if system else []) +
            [{"role": "user", "content": prompt}]
        ),
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        data["response_format"] = {"type": "json_object"}
    js = _post(base_url or DEFAULTS["openai_base"], data, _headers_common(key))
    try:
        return js["choices"][0]["message"]["content"].strip()
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        raise LLMError("No text in completion response") from e


def parse_json_text(text: str) -> dict:
    cleaned = _FENCE_RE.sub("", (text or "").strip())
    try:
        obj = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise LLMError(f"Model returned invalid JSON: {e}") from e
    if not isinstance(obj, dict):
        raise LLMError("Model returned JSON that is not an object")
    return obj


def call_llm_json(prompt, system=None, temperature=0.7, max_tokens=900) -> dict:
    text = call_llm(prompt, system=system, temperature=temperature,
                    max_tokens=max_tokens, json_mode=True)
    return parse_json_text(text)
