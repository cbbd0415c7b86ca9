import json
import re
from typing import Any, Dict, Optional

from illustration_ai.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Outermost-brace scan: first "{" through last "}", not nesting-aware.
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")


def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_json_safely(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse a JSON object out of model output.

    Tries the whole text first, then the span from the first ``{`` to the
    last ``}``. Models often wrap the object in prose despite being told not
    to, so a miss here is a normal outcome and never raises.

    Args:
        text: Raw model response

    Returns:
        Parsed object, or None when nothing parsable was found
    """
    if not text:
        return None

    parsed = _loads_object(text)
    if parsed is not None:
        return parsed

    match = _OBJECT_SPAN.search(text)
    if not match:
        LOGGER.debug("No JSON object span found in response")
        return None

    parsed = _loads_object(match.group(0))
    if parsed is None:
        LOGGER.warning(
            "Failed to parse JSON object span",
            extra={"response": text[:500]},
        )
    return parsed
