"""
Search box parsing.

A search string is split on whitespace. Tokens starting with ``status:`` or
``platform:`` (any case) are directives; the last occurrence of each wins.
Everything else is free text, matched as one lowercased phrase.
"""

from .models import FilterQuery

STATUS_PREFIX = "status:"
PLATFORM_PREFIX = "platform:"


def parse(raw: str | None) -> FilterQuery:
    """
    Tokenize a search string into directives plus residual text.

    Examples:
        >>> parse("status:playing halo")
        FilterQuery(status_filter='playing', platform_filter=None, text_tokens=['halo'])
        >>> parse("platform:steam platform:gog doom").platform_filter
        'gog'
    """
    query = FilterQuery()
    if not raw or not raw.strip():
        return query

    for token in raw.split():
        lower = token.lower()
        if lower.startswith(STATUS_PREFIX):
            query.status_filter = lower[len(STATUS_PREFIX):]
        elif lower.startswith(PLATFORM_PREFIX):
            query.platform_filter = lower[len(PLATFORM_PREFIX):]
        else:
            query.text_tokens.append(lower)

    return query
