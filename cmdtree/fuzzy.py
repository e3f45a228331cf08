"""
Edit distance and "did you mean" suggestions for unknown command tokens.
"""

# Suggestions further away than this are noise (a long typo should not
# suggest a two-letter command).
THRESHOLD = 2


def distance(a, b, /):
    """
    Levenshtein distance between two strings.

    The minimum number of single-character insertions, deletions or
    substitutions turning a into b. Runs in O(len(a) * len(b)) time and keeps a
    single row sized after the shorter string.

    Examples
    - distance("kitten", "sitting") -> 3
    - distance("", "hello")         -> 5
    - distance("ab", "ba")          -> 2
    """
    if not isinstance(a, str) or not isinstance(b, str):
        raise TypeError("distance() arguments must be strings")
    if a == b:
        return 0
    if not a or not b:
        return len(a) or len(b)

    # Keep the row over the shorter string.
    if len(a) > len(b):
        a, b = b, a

    row = list(range(len(a) + 1))
    for i, y in enumerate(b, 1):
        diagonal, row[0] = row[0], i
        for j, x in enumerate(a, 1):
            diagonal, row[j] = row[j], min(
                row[j] + 1,             # deletion
                row[j - 1] + 1,         # insertion
                diagonal + (x != y),    # substitution (free on match)
            )
    return row[-1]


def suggest(target, names, /):
    """
    Return the closest name to target, or None when nothing is close enough.

    Rules
    - every candidate name is measured with distance(); the first candidate
      with the smallest distance wins ties.
    - candidates further than THRESHOLD edits are never suggested.
    - comparison is case-sensitive: "verZion" suggests "version" (one edit)
      while "verZION" suggests nothing (four edits). Normalize both sides
      before calling for case-insensitive behavior.
    """
    best, match = THRESHOLD + 1, None
    for name in names:
        if (score := distance(target, name)) < best:
            best, match = score, name
    return match


__all__ = (
    "THRESHOLD",
    "distance",
    "suggest",
)
