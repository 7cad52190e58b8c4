"""Input validation utilities."""

# Maximum lengths for common fields
MAX_SEARCH_LENGTH = 200


def sanitize_search(search: str | None, max_length: int = MAX_SEARCH_LENGTH) -> str | None:
    """Sanitize search input.

    Args:
        search: Raw search string
        max_length: Maximum allowed length

    Returns:
        Sanitized search string or None
    """
    if search is None:
        return None

    search = search[:max_length]

    # SQLAlchemy parameterizes these anyway
    search = search.replace(";", "").replace("--", "")

    return search.strip() or None


def escape_like_wildcards(value: str) -> str:
    """Escape SQL LIKE wildcards so user input matches literally.

    Use together with ``escape="\\\\"`` on the ``like()`` call.

    Args:
        value: Raw string

    Returns:
        String with backslash, percent and underscore escaped
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
