class FlashcardFormatError(ValueError):
    """The model's flashcard answer was not the expected JSON object."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw
