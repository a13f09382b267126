from typing import Optional, Sequence

# Largest edit distance still offered as a "did you mean" suggestion.
MAX_SUGGESTION_DISTANCE = 3


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance; insertion, deletion and substitution cost 1."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        curr = [i]
        for j, cb in enumerate(b, 1):
            ins = curr[j - 1] + 1
            dele = prev[j] + 1
            sub = prev[j - 1] + (ca != cb)
            curr.append(min(ins, dele, sub))
        prev = curr
    return prev[-1]


def suggest_field_name(target: str, candidates: Sequence[str]) -> Optional[str]:
    """Return the closest candidate within MAX_SUGGESTION_DISTANCE, else None.

    Comparison is case-insensitive. Ties keep the earliest candidate.
    """
    needle = target.lower()
    best: Optional[str] = None
    best_distance = MAX_SUGGESTION_DISTANCE + 1
    for candidate in candidates:
        distance = levenshtein_distance(needle, candidate.lower())
        if distance < best_distance:
            best = candidate
            best_distance = distance
    return best
