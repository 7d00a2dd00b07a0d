"""Query helpers shared by services."""

LIKE_ESCAPE = "\\"


def contains_pattern(keyword: str) -> str:
    """
    Build an ``ilike`` pattern matching ``keyword`` as a literal substring.

    ``%`` and ``_`` in the keyword are escaped with ``LIKE_ESCAPE``; pass
    ``escape=LIKE_ESCAPE`` to ``ilike``.
    """
    escaped = (
        keyword.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
