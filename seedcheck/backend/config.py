import os
from dataclasses import dataclass


DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_TIMEOUT_SECONDS = 120.0
DEFAULT_MAX_TOKENS = 4000
DEFAULT_TEMPERATURE = 0.3
DEFAULT_DEMO_DELAY_SECONDS = 3.0
PARSE_MISS_MODES = {"live", "demo", "error"}


def _env_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}.") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc


@dataclass(frozen=True)
class AnalyzerSettings:
    """Everything the analysis core needs to decide between demo and live mode.

    Built once per request and handed to the analyzer, so tests never have to
    touch the process environment.
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    demo_delay_seconds: float = DEFAULT_DEMO_DELAY_SECONDS
    parse_miss_mode: str = "live"

    def __post_init__(self) -> None:
        if self.parse_miss_mode not in PARSE_MISS_MODES:
            raise ValueError(
                f"parse_miss_mode must be one of {sorted(PARSE_MISS_MODES)}, got {self.parse_miss_mode!r}."
            )
        if self.demo_delay_seconds < 0:
            raise ValueError("demo_delay_seconds must not be negative.")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive.")
        if self.max_tokens <= 0:
            raise ValueError("max_tokens must be positive.")

    @property
    def has_credentials(self) -> bool:
        return bool((self.api_key or "").strip())

    @classmethod
    def from_env(cls) -> "AnalyzerSettings":
        return cls(
            api_key=os.getenv("SEEDCHECK_LLM_API_KEY", "").strip(),
            base_url=_env_str("SEEDCHECK_LLM_BASE_URL", DEFAULT_BASE_URL),
            model=_env_str("SEEDCHECK_LLM_MODEL", DEFAULT_MODEL),
            timeout_seconds=_env_float("SEEDCHECK_LLM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            max_tokens=_env_int("SEEDCHECK_LLM_MAX_TOKENS", DEFAULT_MAX_TOKENS),
            temperature=_env_float("SEEDCHECK_LLM_TEMPERATURE", DEFAULT_TEMPERATURE),
            demo_delay_seconds=_env_float("SEEDCHECK_DEMO_DELAY_SECONDS", DEFAULT_DEMO_DELAY_SECONDS),
            parse_miss_mode=_env_str("SEEDCHECK_PARSE_MISS_MODE", "live").lower(),
        )
