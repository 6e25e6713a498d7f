# --- START OF FILE utils.py ---

import base64
import json
from typing import Optional


def sh_quote(value: str) -> str:
    """
    Quote a literal argument for POSIX sh.

    Wraps the value in single quotes; each embedded single quote becomes
    close-quote, backslash, quote, open-quote ('\\'').
    """
    return "'" + value.replace("'", "'\\''") + "'"


def b64encode_text(text: str) -> str:
    """UTF-8 encode and base64 (standard alphabet, no line wrapping)."""
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


def split_lines(text: str) -> list[str]:
    """
    Split process output into lines the way a line reader would.

    A single trailing newline does not produce an empty last line, interior
    empty lines are kept.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def parse_json_object(raw: str) -> Optional[dict]:
    """
    Strictly parse raw text as a JSON object.

    Returns the dict, or None if the text is not valid JSON or is valid JSON
    of another type (array, string, ...). Never raises.
    """
    if not raw or not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, ValueError):
        return None
    return data if isinstance(data, dict) else None

# --- END OF FILE utils.py ---
