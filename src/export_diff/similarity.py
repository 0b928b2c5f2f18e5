"""
Normalized string similarity based on Levenshtein edit distance.

Used by the line differ to decide whether two differing lines are an
edit of one another or an unrelated insertion/deletion.
"""


# Lines whose lengths differ by more than this fraction of the longer
# one are scored 0 without computing the distance.
LENGTH_RATIO_CUTOFF = 0.5


def levenshtein(a: str, b: str) -> int:
    """
    Unit-cost edit distance between two strings.

    Keeps two rows of the DP table, so memory is O(min(len(a), len(b))).
    """
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current

    return previous[-1]


def similarity(a: str, b: str) -> float:
    """
    Compute similarity between two strings in [0, 1].

    Returns 1.0 for identical strings and 0.0 when exactly one is empty
    or when their lengths are too far apart to be worth comparing.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    longest = max(len(a), len(b))
    if abs(len(a) - len(b)) > longest * LENGTH_RATIO_CUTOFF:
        return 0.0

    return 1.0 - levenshtein(a, b) / longest
