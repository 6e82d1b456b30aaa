from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

ROLE_MARKERS = ("LEAD", "PLAT")

_EDGE_PUNCTUATION = "()[]{}*.,;:-_/\\'\"#"


@dataclass(frozen=True)
class EventMatch:
    event_type: str
    full_code: str


class EventCodeTable:
    """
    Longest-prefix lookup over the configured event type codes.

    Codes are bucketed by length once; a lookup tries each distinct
    length from longest to shortest, so "BITS1234" resolves to "BITS"
    even though "BIT" might also be configured.
    """

    def __init__(self, codes: Iterable[str]) -> None:
        buckets: Dict[int, set] = defaultdict(set)
        for code in codes:
            code = code.strip().upper()
            if code:
                buckets[len(code)].add(code)
        self._buckets: Dict[int, FrozenSet[str]] = {
            n: frozenset(c) for n, c in buckets.items()
        }
        self._lengths: Tuple[int, ...] = tuple(sorted(self._buckets, reverse=True))

    def __len__(self) -> int:
        return sum(len(b) for b in self._buckets.values())

    def match(self, token: str) -> Optional[str]:
        """Return the longest configured code that prefixes `token`."""
        cleaned = token.strip().upper()
        for n in self._lengths:
            if n <= len(cleaned) and cleaned[:n] in self._buckets[n]:
                return cleaned[:n]
        return None

    def find_event(self, chunk: str) -> Optional[EventMatch]:
        """
        Find the event code among the free-text tokens of a schedule row.

        First pass: the first token that starts with a known code.
        Second pass: a token directly followed by a role marker
        ("FRM LEAD"), with surrounding punctuation stripped.
        """
        tokens = chunk.split()
        for token in tokens:
            evt = self.match(token)
            if evt:
                return EventMatch(event_type=evt, full_code=token.upper())

        for token, nxt in zip(tokens, tokens[1:]):
            marker = nxt.upper()
            if marker not in ROLE_MARKERS:
                continue
            stripped = token.strip(_EDGE_PUNCTUATION)
            evt = self.match(stripped) if stripped else None
            if evt:
                return EventMatch(event_type=evt, full_code=f"{stripped.upper()} {marker}")
        return None


def has_lead_marker(text: str) -> bool:
    """"LEAD" as a word of its own; names such as LEADBETTER do not count."""
    return any(tok.strip(_EDGE_PUNCTUATION) == "LEAD" for tok in text.upper().split())
