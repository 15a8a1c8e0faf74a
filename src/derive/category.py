"""Policy/Procedure category classification."""

from common.constants import CATEGORY_BOTH, CATEGORY_POLICY, CATEGORY_PROCEDURE


def classify_category(title: str | None) -> str:
    """Classify a document title as Policy, Procedure, or both.

    Matching is a case-insensitive substring test. Titles that mention
    neither keyword fall back to Procedure.

    Args:
        title: Document title

    Returns:
        'Policy & Procedure', 'Policy', or 'Procedure'
    """
    lowered = (title or "").lower()
    has_policy = "policy" in lowered
    has_procedure = "procedure" in lowered

    if has_policy and has_procedure:
        return CATEGORY_BOTH
    if has_policy:
        return CATEGORY_POLICY
    return CATEGORY_PROCEDURE
