"""Word-boundary spacing for camel/Pascal-case site names."""


class StringNormalizer:
    """Insert spaces at case transitions, e.g. 'HumanResources' -> 'Human Resources'.

    Results are memoized per instance. The same site segment shows up on many
    documents in a single run, so one normalizer is created per reconciler.
    """

    def __init__(self):
        """Initialize normalizer with empty cache."""
        self.cache: dict[str, str] = {}

    def normalize(self, value: str | None) -> str | None:
        """Split a site segment into words.

        A space goes between characters i and i+1 when:
        - i is lowercase and i+1 is uppercase, or
        - i and i+1 are uppercase and i+2 is lowercase (acronym followed by a word).

        Args:
            value: Identifier-like string such as a URL path segment

        Returns:
            Spaced string; empty or None input is returned unchanged

        Example:
            >>> StringNormalizer().normalize("HRPolicyDept")
            'HR Policy Dept'
        """
        if not value:
            return value

        if value in self.cache:
            return self.cache[value]

        chars: list[str] = []
        last = len(value) - 1
        for i, char in enumerate(value):
            chars.append(char)
            if i == last:
                break
            following = value[i + 1]
            if char.islower() and following.isupper():
                chars.append(" ")
            elif (
                char.isupper()
                and following.isupper()
                and i + 2 <= last
                and value[i + 2].islower()
            ):
                chars.append(" ")

        result = "".join(chars)
        self.cache[value] = result
        return result

    def get_cache_size(self) -> int:
        """Number of memoized segments."""
        return len(self.cache)

    def clear_cache(self) -> None:
        self.cache.clear()
