#!/usr/bin/env python3
"""
Structured extraction: page context + instruction + schema -> LLM -> validated model.
"""
import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .error_handler import ExtractionError
from .page_context import extract_page_context

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def build_extraction_prompt(instruction: str, schema: Type[BaseModel], context: Dict[str, Any]) -> str:
    elements = context.get("interactive_elements") or []
    return (
        "You extract structured data from a web page.\n"
        "Follow the instruction, use only what the page context shows, "
        "and leave a field out when the page gives no evidence for it.\n"
        "Output ONLY valid JSON matching the JSON Schema, no comments, no extra text.\n\n"
        f"Instruction:\n{instruction}\n\n"
        f"JSON Schema:\n{json.dumps(schema.model_json_schema(), indent=2)}\n\n"
        f"Page title: {context.get('title', '')}\n"
        f"Page URL: {context.get('url', '')}\n\n"
        f"Interactive elements ({len(elements)}):\n"
        f"{json.dumps(elements, ensure_ascii=False)}\n\n"
        f"Page text:\n{context.get('text', '')}\n\n"
        "Return JSON only:"
    )


def parse_json_response(text: str) -> Any:
    """
    Parse the JSON payload of an LLM reply.

    Accepts a bare object or array, or one wrapped in prose or a code fence.
    Raises ValueError when no JSON can be decoded.
    """
    s = (text or "").strip()
    if not s:
        raise ValueError("Invalid JSON: empty reply")
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        pass
    # Locate object/array boundaries if the model added prose; outermost bracket first
    pairs = sorted((("{", "}"), ("[", "]")), key=lambda p: s.find(p[0]) if p[0] in s else len(s))
    for open_ch, close_ch in pairs:
        first = s.find(open_ch)
        last = s.rfind(close_ch)
        if 0 <= first < last:
            try:
                return json.loads(s[first:last + 1])
            except json.JSONDecodeError:
                continue
    raise ValueError(f"Invalid JSON in model reply: {s[:200]}")


def _single_list_field(schema: Type[BaseModel]) -> Optional[str]:
    fields = list(schema.model_fields)
    return fields[0] if len(fields) == 1 else None


def coerce_to_schema(data: Any, schema: Type[T]) -> T:
    """Validate parsed JSON against `schema`, wrapping a bare list into its single list field."""
    if isinstance(data, list):
        key = _single_list_field(schema)
        if key is None:
            raise ExtractionError(f"Model returned a list but {schema.__name__} is not a single-list schema")
        data = {key: data}
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ExtractionError(f"Validation error against {schema.__name__}: {e}") from e


async def extract_structured(
    page,
    llm,
    instruction: str,
    schema: Type[T],
    dom_max_chars: int = 30000,
    max_elements: int = 300,
) -> T:
    """
    Run one structured-extraction call against a Playwright page.

    Raises:
        ExtractionError: context collection, LLM call, JSON parsing or validation failed
    """
    try:
        context = await extract_page_context(page, dom_max_chars=dom_max_chars, max_elements=max_elements)
    except Exception as e:
        raise ExtractionError(f"Failed to read page context: {e}") from e
    logger.debug(
        f"Page context: {len(context.get('interactive_elements', []))} elements, "
        f"{len(context.get('text', '') or '')} chars"
    )

    prompt = build_extraction_prompt(instruction, schema, context)
    try:
        resp = await llm.ainvoke(prompt)
    except Exception as e:
        raise ExtractionError(f"LLM call failed: {e}") from e
    text = resp.get("text", "") if isinstance(resp, dict) else str(resp)

    try:
        data = parse_json_response(text)
    except ValueError as e:
        raise ExtractionError(str(e)) from e
    return coerce_to_schema(data, schema)
