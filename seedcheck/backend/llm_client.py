from typing import Any

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI

from .config import AnalyzerSettings
from .constants import MAX_ERROR_CHARS
from .errors import ServiceError


def _truncate(text: str, max_chars: int = MAX_ERROR_CHARS) -> str:
    value = (text or "").strip()
    if len(value) <= max_chars:
        return value
    return value[: max_chars - 3] + "..."


def _build_client(settings: AnalyzerSettings) -> OpenAI:
    if not settings.has_credentials:
        raise ServiceError("Missing LLM API key. Set SEEDCHECK_LLM_API_KEY to enable live analysis.")
    return OpenAI(
        base_url=settings.base_url,
        api_key=settings.api_key.strip(),
        timeout=settings.timeout_seconds,
        max_retries=0,
    )


def _extract_content(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts = []
        for item in value:
            if isinstance(item, dict):
                text = item.get("text")
                if text:
                    parts.append(str(text))
        return "\n".join(parts).strip()
    return str(value or "").strip()


def request_completion(
    settings: AnalyzerSettings,
    *,
    system_prompt: str,
    user_prompt: str,
) -> str:
    """Send exactly one chat completion request and return the assistant text."""
    client = _build_client(settings)

    try:
        response = client.chat.completions.create(
            model=settings.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
    except APIStatusError as exc:
        provider_message = _truncate(getattr(exc, "message", "") or str(exc))
        status_code = getattr(exc, "status_code", None)
        if status_code is not None:
            raise ServiceError(f"LLM request failed ({status_code}): {provider_message}") from exc
        raise ServiceError(f"LLM request failed: {provider_message}") from exc
    except APITimeoutError as exc:
        raise ServiceError("LLM request timed out.") from exc
    except APIConnectionError as exc:
        raise ServiceError(f"Failed to connect to LLM provider: {exc}") from exc
    except Exception as exc:
        raise ServiceError(f"Unexpected LLM error: {_truncate(str(exc))}") from exc

    try:
        choice = response.choices[0] if response.choices else None
    except Exception as exc:
        raise ServiceError(f"Unexpected LLM response shape: {exc}") from exc

    if choice is None:
        raise ServiceError("LLM response did not contain choices.")

    # An empty reply is a parse miss for the caller, not a service failure.
    return _extract_content(choice.message.content)
