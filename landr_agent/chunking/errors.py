from typing import List, Optional


class ChunkProcessingError(Exception):
    """Raised when every chunk of a content item failed."""

    def __init__(self, message: str, operation: str, errors: Optional[List[Exception]] = None):
        super().__init__(message)
        self.operation = operation
        self.errors = errors or []
