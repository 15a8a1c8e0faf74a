"""Author field cleanup."""

import re

# Whole-field e-mail address: local@domain.tld
EMAIL_PATTERN = re.compile(r"[\w.-]+@[\w-]+(\.[\w-]+)+")


def format_authors(raw: str | None) -> str:
    """Drop e-mail tokens and blanks from a semicolon-delimited author list.

    Names keep their original order and are not de-duplicated.

    Args:
        raw: Author string as reported by search, e.g. 'Jane Doe; jane@x.com'

    Returns:
        Cleaned list joined with '; ', or '' when nothing remains

    Example:
        >>> format_authors("Jane Doe; jane@x.com; Bob Lee")
        'Jane Doe; Bob Lee'
    """
    if not raw:
        return ""

    names = []
    for field in raw.split(";"):
        field = field.strip()
        if not field or EMAIL_PATTERN.fullmatch(field):
            continue
        names.append(field)
    return "; ".join(names)
