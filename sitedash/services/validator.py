"""Shape checks for site records before they are written to disk."""

import re
from typing import Any, List

_URL_SCHEME_RE = re.compile(r"^https?://")


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_site(record: Any) -> List[str]:
    """Return one message per rule *record* violates; an empty list means valid.

    Rules are checked independently so every problem is reported at once:

    * ``name`` is a non-blank string.
    * ``url`` is a non-blank string starting with ``http://`` or ``https://``.
    * ``links`` and ``tags``, when present, are lists.

    Any other field is passed through without inspection.
    """
    if not isinstance(record, dict):
        return ["Site record must be a mapping of fields"]

    errors = []

    if not _is_non_empty_string(record.get("name")):
        errors.append("name is required and must be a non-empty string")

    url = record.get("url")
    if not _is_non_empty_string(url):
        errors.append("url is required and must be a non-empty string")
    elif not _URL_SCHEME_RE.match(url):
        errors.append("url must be a valid HTTP/HTTPS URL")

    if record.get("links") is not None and not isinstance(record["links"], list):
        errors.append("links must be a list")

    if record.get("tags") is not None and not isinstance(record["tags"], list):
        errors.append("tags must be a list")

    return errors
