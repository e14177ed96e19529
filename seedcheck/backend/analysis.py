from __future__ import annotations

import json
import logging
import re
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .config import AnalyzerSettings
from .errors import AnalysisError, DecodeError, ParseMissError, SchemaError, ServiceError
from .llm_client import request_completion
from .mock_analysis import build_mock_analysis
from .models import AnalysisResult
from .prompt_builder import build_system_prompt, build_user_prompt
from .prompts.readiness import READINESS_PROMPT_VERSION
from .rubric import DIMENSION_NAMES, MAX_DIMENSION_SCORE, MAX_OVERALL_SCORE, SCORE_LABELS, label_for_score


logger = logging.getLogger("uvicorn.error")

FENCED_JSON_PATTERN = re.compile(r"```json[ \t]*\n?([\s\S]*?)\n?```")
BARE_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
EXPECTED_DIMENSIONS = 4
EXPECTED_RECOMMENDATIONS = 3

CompleteFn = Callable[[str, str], str]


@dataclass(frozen=True)
class JsonSpan:
    branch: str  # "fenced" | "bare"
    text: str


def extract_json_span(raw_text: str) -> Optional[JsonSpan]:
    """Find the JSON object in a model reply.

    A ```json fenced block wins; otherwise the span from the first "{" to the
    last "}" is used. Returns None when neither is present.
    """
    text = raw_text or ""
    fenced = FENCED_JSON_PATTERN.search(text)
    if fenced:
        return JsonSpan(branch="fenced", text=fenced.group(1))
    bare = BARE_OBJECT_PATTERN.search(text)
    if bare:
        return JsonSpan(branch="bare", text=bare.group(0))
    return None


def decode_json_span(span: JsonSpan) -> Any:
    try:
        return json.loads(span.text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Model output ({span.branch} span) is not valid JSON: {exc}") from exc


def _require_int(value: Any, field: str, minimum: int, maximum: int) -> int:
    if isinstance(value, bool):
        raise SchemaError(f"{field} must be an integer.")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise SchemaError(f"{field} must be an integer.")
    if not (minimum <= value <= maximum):
        raise SchemaError(f"{field} must be between {minimum} and {maximum}, got {value}.")
    return value


def _require_string(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise SchemaError(f"{field} must be a non-empty string.")
    return value


def _require_string_list(value: Any, field: str, exact: Optional[int] = None) -> list[str]:
    if not isinstance(value, list):
        raise SchemaError(f"{field} must be an array of strings.")
    if exact is not None and len(value) != exact:
        raise SchemaError(f"{field} must contain exactly {exact} items, got {len(value)}.")
    return [_require_string(item, f"{field}[{index}]") for index, item in enumerate(value)]


def _validate_dimension(value: Any, index: int) -> dict:
    prefix = f"dimensions[{index}]"
    if not isinstance(value, Mapping):
        raise SchemaError(f"{prefix} must be an object.")

    name = _require_string(value.get("name"), f"{prefix}.name")
    if name not in DIMENSION_NAMES:
        raise SchemaError(f'Unexpected dimension name "{name}".')
    max_score = _require_int(value.get("maxScore"), f"{prefix}.maxScore", MAX_DIMENSION_SCORE, MAX_DIMENSION_SCORE)

    return {
        "name": name,
        "score": _require_int(value.get("score"), f"{prefix}.score", 0, max_score),
        "maxScore": max_score,
        "summary": _require_string(value.get("summary"), f"{prefix}.summary"),
        "whatsWorking": _require_string_list(value.get("whatsWorking"), f"{prefix}.whatsWorking"),
        "whatsMissing": _require_string_list(value.get("whatsMissing"), f"{prefix}.whatsMissing"),
        "priorityFix": _require_string(value.get("priorityFix"), f"{prefix}.priorityFix"),
        "investorLens": _require_string(value.get("investorLens"), f"{prefix}.investorLens"),
    }


def validate_analysis_schema(payload: Any) -> dict:
    """Check a decoded model reply against the result contract.

    Returns the camelCase fields of the result without ``mode``. Unknown keys
    are dropped.
    """
    if not isinstance(payload, Mapping):
        raise SchemaError("Analysis JSON root must be an object.")

    overall_score = _require_int(payload.get("overallScore"), "overallScore", 0, MAX_OVERALL_SCORE)

    label = payload.get("label")
    if label not in SCORE_LABELS:
        raise SchemaError(f'label must be one of {", ".join(SCORE_LABELS)}, got {label!r}.')
    expected_label = label_for_score(overall_score)
    if label != expected_label:
        raise SchemaError(f'label "{label}" does not match overallScore {overall_score} ("{expected_label}").')

    dimensions = payload.get("dimensions")
    if not isinstance(dimensions, list) or len(dimensions) != EXPECTED_DIMENSIONS:
        raise SchemaError(f'Analysis must contain exactly {EXPECTED_DIMENSIONS} "dimensions".')
    validated_dimensions = [_validate_dimension(item, index) for index, item in enumerate(dimensions)]

    names = [item["name"] for item in validated_dimensions]
    if set(names) != set(DIMENSION_NAMES):
        raise SchemaError("Analysis dimensions do not match the rubric categories.")

    dimension_total = sum(item["score"] for item in validated_dimensions)
    if dimension_total != overall_score:
        raise SchemaError(f"Dimension scores sum to {dimension_total}, but overallScore is {overall_score}.")

    return {
        "overallScore": overall_score,
        "label": label,
        "dimensions": validated_dimensions,
        "narrative": _require_string(payload.get("narrative"), "narrative"),
        "topRecommendations": _require_string_list(
            payload.get("topRecommendations"),
            "topRecommendations",
            exact=EXPECTED_RECOMMENDATIONS,
        ),
    }


class ReadinessAnalyzer:
    """Runs one readiness analysis: demo fallback, or a single model call plus interpretation."""

    def __init__(
        self,
        settings: AnalyzerSettings,
        *,
        complete: Optional[CompleteFn] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self._complete = complete or self._request_completion
        self._sleep = sleep

    def _request_completion(self, system_prompt: str, user_prompt: str) -> str:
        return request_completion(self.settings, system_prompt=system_prompt, user_prompt=user_prompt)

    def analyze(self, answers: Optional[Mapping[str, Any]], deck_text: Optional[str] = None) -> AnalysisResult:
        if not self.settings.has_credentials:
            logger.info("analysis_mode=demo reason=no_credentials delay_seconds=%s", self.settings.demo_delay_seconds)
            if self.settings.demo_delay_seconds > 0:
                self._sleep(self.settings.demo_delay_seconds)
            return build_mock_analysis("demo")

        has_deck = bool(deck_text and deck_text.strip())
        user_prompt = build_user_prompt(answers, deck_text)
        logger.info(
            "analysis_mode=live model=%s prompt_version=%s has_deck=%s prompt_chars=%d",
            self.settings.model,
            READINESS_PROMPT_VERSION,
            has_deck,
            len(user_prompt),
        )
        raw_text = self._invoke(build_system_prompt(), user_prompt)
        return self.interpret(raw_text)

    def _invoke(self, system_prompt: str, user_prompt: str) -> str:
        try:
            return self._complete(system_prompt, user_prompt)
        except AnalysisError:
            raise
        except Exception as exc:
            raise ServiceError(f"LLM call failed: {exc}") from exc

    def interpret(self, raw_text: str) -> AnalysisResult:
        span = extract_json_span(raw_text)
        if span is None:
            return self._fallback_on_parse_miss(raw_text)

        logger.info("json_extraction branch=%s span_chars=%d", span.branch, len(span.text))
        validated = validate_analysis_schema(decode_json_span(span))
        return AnalysisResult.model_validate({**validated, "mode": "live"})

    def _fallback_on_parse_miss(self, raw_text: str) -> AnalysisResult:
        mode = self.settings.parse_miss_mode
        logger.warning(
            "json_extraction branch=none parse_miss_mode=%s response_chars=%d",
            mode,
            len(raw_text or ""),
        )
        if mode == "error":
            raise ParseMissError("Model reply did not contain a JSON object.")
        # "live" keeps the historical label even though the content is canned.
        return build_mock_analysis(mode)
