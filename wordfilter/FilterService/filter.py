import re
from typing import List, Optional, Pattern, Tuple

from markupsafe import Markup

DEFAULT_REPLACEMENT = "***"

_ENTITY_RE = re.compile(r"(&(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);)")


def parse_terms(raw_terms: Optional[str]) -> List[str]:
    """
    Split a comma-separated term list and trim each entry.

    Entries that are empty once trimmed are dropped, otherwise they would match
    between every character of the content.
    """
    if not raw_terms:
        return []
    terms = (term.strip() for term in raw_terms.split(","))
    return [term for term in terms if term]


def escape_replacement(replacement: str) -> str:
    """HTML-escape the replacement, leaving entities it already holds intact."""
    pieces = _ENTITY_RE.split(replacement)
    # Odd indexes are the captured entities.
    return str(
        Markup("").join(
            Markup(piece) if index % 2 else piece
            for index, piece in enumerate(pieces)
        )
    )


class WordFilter:
    def __init__(self, raw_terms: Optional[str], replacement: Optional[str] = None):
        self.terms: List[str] = parse_terms(raw_terms)
        if replacement is None:
            replacement = DEFAULT_REPLACEMENT
        # Matched terms disappear from the output, only the replacement is rendered.
        self.replacement: str = escape_replacement(replacement)
        self.patterns: List[Pattern] = [
            re.compile(re.escape(term), flags=re.IGNORECASE) for term in self.terms
        ]

    def apply(self, text: str) -> str:
        """
        Replace the terms one at a time, in list order.

        The text is kept as segments flagged as replaced or not; each term only
        searches segments no earlier term has replaced, so inserted replacement
        text is never matched again.
        """
        if not self.patterns:
            return text

        segments: List[Tuple[str, bool]] = [(text, False)]
        for pattern in self.patterns:
            next_segments: List[Tuple[str, bool]] = []
            for segment, replaced in segments:
                if replaced:
                    next_segments.append((segment, True))
                    continue
                start = 0
                for match in pattern.finditer(segment):
                    if match.start() > start:
                        next_segments.append((segment[start : match.start()], False))
                    next_segments.append((match.group(0), True))
                    start = match.end()
                if start < len(segment):
                    next_segments.append((segment[start:], False))
            segments = next_segments

        return "".join(
            self.replacement if replaced else segment for segment, replaced in segments
        )


def filter_content(
    content: str, raw_terms: Optional[str], replacement: Optional[str] = None
) -> str:
    """Replace every case-insensitive occurrence of the configured terms."""
    return WordFilter(raw_terms, replacement).apply(content)
