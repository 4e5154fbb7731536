import re


def sanitize(name: str) -> str:
    """Sanitize a display name so it can be used as a solution filename.

    Replaces any non-word characters (anything except a-z, A-Z, 0-9, _) with underscores.
    """
    return re.sub(r"[^\w]", "_", name)


def complement(counts: list[int], proposal: list[int]) -> list[int]:
    """What the counterpart gets when a proposer keeps ``proposal``."""
    return [count - kept for count, kept in zip(counts, proposal)]


def is_valid_proposal(proposal, counts: list[int]) -> bool:
    if not isinstance(proposal, (list, tuple)) or len(proposal) != len(counts):
        return False
    return all(
        isinstance(n, int) and not isinstance(n, bool) and 0 <= n <= c
        for n, c in zip(proposal, counts)
    )
