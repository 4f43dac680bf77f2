"""Helpers to turn the interviewer's JSON reply into a presentation reply."""

import json
from typing import Any
from loguru import logger
from .models import Animation, FacialExpression, StructuredReply


def _coerce_enum(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


def parse_structured_reply(content: str) -> StructuredReply:
    """
    Parse `{"text", "facialExpression", "animation"}` from the model output.
    Output that is not such an object is wrapped as plain text with default
    presentation hints instead of failing the turn.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        logger.warning(f"Interviewer reply is not JSON, wrapping raw text: {content[:200]}")
        return StructuredReply(text=content)

    if not isinstance(data, dict) or not isinstance(data.get("text"), str):
        logger.warning(f"Interviewer reply has no text field, wrapping raw text: {content[:200]}")
        return StructuredReply(text=content)

    return StructuredReply(
        text=data["text"],
        facialExpression=_coerce_enum(FacialExpression, data.get("facialExpression"), FacialExpression.DEFAULT),
        animation=_coerce_enum(Animation, data.get("animation"), Animation.TALKING_1),
    )
