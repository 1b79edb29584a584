from typing import Any, Optional, Sequence

from ..config import MATCH_CUTOFF
from ..logging import get_logger
from .models import MatchResult

LOG = get_logger("matching")


def candidate_name(candidate: Any) -> str:
    """Catalog entries are plain strings or objects with a `name` attribute."""
    if isinstance(candidate, str):
        return candidate
    return str(getattr(candidate, "name", "") or "")


def normalize_name(name: str) -> str:
    return (name or "").strip().lower()


def score_match(query: str, catalog: Sequence[Any], *, min_score: float = MATCH_CUTOFF) -> MatchResult:
    """Find the catalog entry that best matches `query` without any network call.

    - Empty/whitespace query: no match, catalog is not scanned.
    - Exact case-insensitive name: first such entry, score 1.0.
    - Otherwise entries where either name contains the other are scored
      len(shorter) / len(longer); the first best entry wins if its score
      reaches `min_score`.
    """
    q = normalize_name(query)
    if not q:
        return MatchResult.none()

    names = [normalize_name(candidate_name(c)) for c in catalog]
    for candidate, name in zip(catalog, names):
        if name == q:
            LOG.debug(f"Exact match for '{q}'")
            return MatchResult(candidate, 1.0)

    best: Optional[Any] = None
    best_score = 0.0
    for candidate, name in zip(catalog, names):
        if name in q or q in name:
            score = min(len(q), len(name)) / max(len(q), len(name))
            if score > best_score:
                best, best_score = candidate, score

    if best is not None and best_score >= min_score:
        LOG.debug(f"Substring match for '{q}' -> '{candidate_name(best)}' (score={best_score:.3f})")
        return MatchResult(best, best_score)
    LOG.debug(f"No confident match for '{q}' (best score={best_score:.3f})")
    return MatchResult.none()


def find_match(query: str, catalog: Sequence[Any], *, min_score: float = MATCH_CUTOFF) -> Optional[Any]:
    return score_match(query, catalog, min_score=min_score).candidate
