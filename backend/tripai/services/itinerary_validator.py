"""Validate raw provider text into an Itinerary."""
import json
import logging

from pydantic import ValidationError as PydanticValidationError

from tripai.errors import MalformedResponse, SchemaError
from tripai.schemas.itinerary import Itinerary

logger = logging.getLogger(__name__)


def _strip_code_fence(raw: str) -> str:
    """Remove a markdown code fence the provider may wrap around the JSON."""
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
    return text.strip()


def _describe(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def validate_itinerary(raw: str) -> Itinerary:
    """Parse and validate provider output.

    Raises:
        MalformedResponse: ``raw`` is not JSON.
        SchemaError: the top level is not an object, ``days`` is not a list,
            or any entry violates the itinerary shape.
    """
    if not isinstance(raw, str):
        raise MalformedResponse()

    try:
        data = json.loads(_strip_code_fence(raw))
    except json.JSONDecodeError as e:
        logger.warning(f"Provider output is not JSON ({len(raw)} chars): {e.msg}")
        raise MalformedResponse()

    if not isinstance(data, dict):
        raise SchemaError("Itinerary must be a JSON object.")
    if not isinstance(data.get("days"), list):
        raise SchemaError("Itinerary must contain a 'days' list.")

    try:
        return Itinerary.model_validate(data)
    except PydanticValidationError as e:
        detail = _describe(e)
        logger.warning(f"Provider itinerary rejected: {detail}")
        raise SchemaError(f"Invalid itinerary: {detail}")
