"""Errors raised by the search core."""


class IndexNotBuiltError(RuntimeError):
    """Raised when the inverted index is read before it has been built."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Index must be built before {operation}")
        self.operation = operation
