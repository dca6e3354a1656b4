"""Custom exceptions for the AMP conversion."""


class ConversionError(Exception):
    """Base exception for all conversion errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class InvalidArgumentError(ConversionError):
    """Raised when a value of the wrong kind is handed to the converter.

    Attributes:
        expected: Description of what was expected
        actual: Description of what was informed
    """

    def __init__(
        self,
        message: str,
        expected: str | None = None,
        actual: str | None = None,
        *args,
        **kwargs,
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(message, *args, **kwargs)


class SlotAlreadyFilledError(InvalidArgumentError):
    """Raised when a structural slot of the output tree is set twice."""

    def __init__(self, tag: str):
        super().__init__(
            f"Tag <{tag}> was already set for this conversion.",
            expected="an empty slot",
            actual=f"<{tag}>",
        )


class InvalidFormatError(ConversionError):
    """Raised when a value cannot be parsed into the format it claims."""

    def __init__(self, message: str, value: str | None = None, *args, **kwargs):
        self.value = value
        super().__init__(message, *args, **kwargs)
