from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from rapidfuzz import fuzz, process


@dataclass(frozen=True)
class StreetSuggestion:
    """A street name missing from the reference, with its closest known spelling."""

    street: str
    suggestion: Optional[str]
    score: float

    def as_row(self) -> dict:
        return {"street": self.street, "suggestion": self.suggestion, "score": round(self.score, 1)}


STREET_SUGGESTION_COLUMNS = ["street", "suggestion", "score"]


def suggest_street(street: str, known: Sequence[str], minimum_score: float = 80.0) -> StreetSuggestion:
    """Find the known street closest to ``street``, if any scores high enough."""
    match = process.extractOne(street, known, scorer=fuzz.token_sort_ratio, score_cutoff=minimum_score)
    if match is None:
        return StreetSuggestion(street=street, suggestion=None, score=0.0)
    suggestion, score, _ = match
    return StreetSuggestion(street=street, suggestion=suggestion, score=score)


def suggest_streets(
    orphans: Iterable[str], known: Sequence[str], minimum_score: float = 80.0
) -> List[StreetSuggestion]:
    return [suggest_street(street, known, minimum_score) for street in orphans]
