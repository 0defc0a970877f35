"""Heuristic classification of failure messages into error categories."""

from collections.abc import Iterable, Sequence

OTHER = "Other"

# Evaluated in order; the first rule with a matching keyword wins.
DEFAULT_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("network", "timeout"), "Network/Timeout"),
    (("auth", "permission"), "Auth"),
    (("validation", "invalid"), "Validation"),
    (("storage", "ipfs", "pinata"), "Storage"),
    (("contract", "blockchain"), "Chain"),
    (("database", "sql"), "Database"),
)


class KeywordClassifier:
    """Case-insensitive substring classifier.

    Args:
        rules: Ordered (keywords, category) pairs. The first rule with a
            keyword contained in the message decides the category.
        default: Category returned when no rule matches.

    Example:
        ```python
        classifier = KeywordClassifier(
            [(("rate limit", "429"), "RateLimit"), *DEFAULT_RULES]
        )
        classifier("HTTP 429 from upstream")  # "RateLimit"
        ```
    """

    def __init__(
        self,
        rules: Iterable[tuple[Sequence[str], str]] = DEFAULT_RULES,
        default: str = OTHER,
    ) -> None:
        self._rules = [
            (tuple(keyword.lower() for keyword in keywords), category)
            for keywords, category in rules
        ]
        self._default = default

    def __call__(self, error: str) -> str:
        lowered = error.lower()
        for keywords, category in self._rules:
            if any(keyword in lowered for keyword in keywords):
                return category
        return self._default


classify_error = KeywordClassifier()
