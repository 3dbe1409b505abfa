import re

_TAG_RE = re.compile(r"<[^>]*>")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_text_field(value: str) -> str:
    """
    Normalise a single-line text field before it is stored.

    Tags and percent-encoded octets are removed, line breaks, tabs and runs of
    whitespace collapse to one space and the result is trimmed.
    """
    if not value:
        return ""
    cleaned = _TAG_RE.sub("", value)
    cleaned = cleaned.replace("<", "&lt;")
    cleaned = _OCTET_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    return cleaned.strip()
