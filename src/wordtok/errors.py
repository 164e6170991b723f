"""Custom exception hierarchy for wordtok tokenization errors."""

from typing import Any

from .types import TokenId


class WordTokError(Exception):
    """Base exception for all wordtok errors."""


class ConfigError(WordTokError):
    """Raised when a tokenizer configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        available: list[str] | None = None,
    ) -> None:
        """Initialize with optional offending field/value appended to the message."""
        extra = " "
        if field:
            extra += f"(field: {field}) (got {value!r}) "
        if available:
            extra += f"(available: {available}) "
        super().__init__(message + extra)
        self.field = field
        self.value = value
        self.available = available


class InvalidInputError(WordTokError):
    """Raised when training input is empty or whitespace-only."""


class NotTrainedError(WordTokError):
    """Raised when an operation needs a trained vocabulary."""


class VocabularyError(WordTokError):
    """Raised when vocabulary operations fail."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        invalid_id: TokenId | None = None,
        token: str | None = None,
    ) -> None:
        """Initialize with optional id, token and vocab_size appended to the message."""
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        if invalid_id is not None:
            extra += f"(invalid id: {invalid_id}) "
        if token is not None:
            extra += f"(token: {token!r}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size
        self.invalid_id = invalid_id
        self.token = token


class ModelLoadError(WordTokError):
    """Raised when loading or importing a tokenizer model fails."""

    def __init__(
        self,
        message: str,
        *,
        model_path: str | None = None,
        version_mismatch: tuple[str, str] | None = None,
    ) -> None:
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        if version_mismatch is not None:
            extra += f"(expected: {version_mismatch[1]}) (got {version_mismatch[0]}) "
        super().__init__(message + extra)
        self.model_path = model_path
        self.version_mismatch = version_mismatch
