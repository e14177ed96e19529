from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Optional

from .prompts.readiness import (
    CLOSING_DIRECTIVE,
    DECK_HEADING,
    NO_DECK_SECTION,
    QUESTIONNAIRE_HEADING,
    SYSTEM_PROMPT,
)
from .questions import get_question_label, is_catalog_id, iter_answer_fields


MISSING_FOUNDER_FIELD = "?"
MISSING_BACKGROUND = "N/A"


def build_system_prompt() -> str:
    return SYSTEM_PROMPT


def _founder_field(entry: Any, name: str) -> str:
    if isinstance(entry, Mapping):
        value = entry.get(name)
    else:
        value = getattr(entry, name, None)
    return str(value).strip() if value is not None else ""


def format_founders(founders: list) -> str:
    lines: list[str] = []
    for entry in founders:
        name = _founder_field(entry, "name") or MISSING_FOUNDER_FIELD
        role = _founder_field(entry, "role") or MISSING_FOUNDER_FIELD
        background = _founder_field(entry, "background") or MISSING_BACKGROUND
        lines.append(f"- {name} ({role}): {background}")
    return "\n".join(lines)


def format_answer_value(value: Any) -> Optional[str]:
    """Render one answer, or return None when it counts as unanswered."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        cleaned = value.strip()
        return cleaned or None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        return format_founders(list(value))
    if isinstance(value, Mapping):
        return json.dumps(value, ensure_ascii=False) if value else None
    rendered = str(value).strip()
    return rendered or None


def _render_answers(answers: Mapping[str, Any]) -> list[str]:
    blocks: list[str] = []
    for answer_field in iter_answer_fields():
        rendered = format_answer_value(answers.get(answer_field.id))
        if rendered is not None:
            blocks.append(f"**{answer_field.label}**\n{rendered}")

    # Keys outside the catalog keep their input order and are labelled by id.
    for key, value in answers.items():
        if is_catalog_id(key):
            continue
        rendered = format_answer_value(value)
        if rendered is not None:
            blocks.append(f"**{get_question_label(key)}**\n{rendered}")
    return blocks


def build_user_prompt(answers: Optional[Mapping[str, Any]], deck_text: Optional[str] = None) -> str:
    parts = [QUESTIONNAIRE_HEADING + "\n\n"]
    for block in _render_answers(answers or {}):
        parts.append(block + "\n\n")

    if deck_text and deck_text.strip():
        parts.append("\n" + DECK_HEADING + "\n\n")
        parts.append(deck_text)
    else:
        parts.append("\n" + NO_DECK_SECTION + "\n")

    parts.append("\n\n" + CLOSING_DIRECTIVE)
    return "".join(parts)
