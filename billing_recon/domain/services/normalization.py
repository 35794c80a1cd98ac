"""Domain normalization helpers."""


def normalize_currency(currency: str | None) -> str | None:
    """Normalize currency code values.

    Args:
        currency: Raw currency code from a repository or rate source.

    Returns:
        str | None: Upper-cased code, or None when blank.
    """
    if not currency:
        return None
    cleaned = currency.strip()
    return cleaned.upper() if cleaned else None


def normalize_description(description: str | None) -> str | None:
    """Normalize link descriptions.

    Args:
        description: Raw description or clarification justification.

    Returns:
        str | None: Stripped description, or None when blank.
    """
    if description is None:
        return None
    cleaned = description.strip()
    return cleaned or None


__all__ = ["normalize_currency", "normalize_description"]
