import json
import re
from typing import Any, Dict, List, Union

from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"```[a-zA-Z0-9_+-]*\s*\n?(.*?)```", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Return the body of the first Markdown code fence, or the text itself.

    Models frequently wrap answers in ```json ... ``` or ```python ... ```
    blocks; everything outside the first fence is commentary.
    """
    if not text:
        return ""
    match = _FENCE_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_json_safely(text: str) -> Union[Dict[str, Any], List[Any], None]:
    """Parse JSON from LLM output, tolerating the usual formatting noise.

    Handles:
    - Markdown code blocks (```json ... ```)
    - Leading/trailing prose around a single JSON value
    - Trailing garbage after a complete object

    Args:
        text: The text containing JSON

    Returns:
        Parsed JSON value or None if nothing parseable was found
    """
    if not text:
        return None

    cleaned_text = strip_code_fences(text)

    try:
        return json.loads(cleaned_text)
    except json.JSONDecodeError as e:
        LOGGER.debug(f"Initial JSON parse failed: {e}, scanning for embedded value")

    decoder = json.JSONDecoder()
    for match in re.finditer(r"[\[{]", cleaned_text):
        try:
            value, _ = decoder.raw_decode(cleaned_text, match.start())
            return value
        except json.JSONDecodeError:
            continue

    snippet = cleaned_text.replace("\n", " ")
    snippet = (snippet[:200] + "...") if len(snippet) > 200 else snippet
    LOGGER.warning(f"No JSON value found in model output: {snippet}")
    return None

