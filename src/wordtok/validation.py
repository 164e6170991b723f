"""Encode/decode round-trip validation."""

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

from ._sanitise import normalize_text

if TYPE_CHECKING:
    from .tokenizer import BPETokenizer

log = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of one round-trip check."""

    is_valid: bool
    original_text: str
    reconstructed_text: str
    # every produced id has a vocabulary entry
    ids_cover_ok: bool
    errors: list[str] = field(default_factory=list)


def validate_round_trip(
    tokenizer: "BPETokenizer", text: str, normalize: bool = False
) -> ValidationResult:
    """
    Check that ``detokenize(tokenize(text))`` reproduces ``text``.

    Comparison is exact against the original text, so inputs with uppercase
    letters or irregular whitespace fail. With ``normalize=True`` the decoded
    text is compared against the lowercased, whitespace-collapsed input.

    Never raises: tokenizer errors become an invalid result.
    """
    try:
        tokens = tokenizer.tokenize(text)
        reconstructed = tokenizer.detokenize(tokens)
    except Exception as e:
        log.exception(f"round-trip validation aborted: {e}")
        return ValidationResult(
            is_valid=False,
            original_text=text,
            reconstructed_text="",
            ids_cover_ok=False,
            errors=[f"validation error: {e}"],
        )

    expected = normalize_text(text) if normalize else text
    is_valid = reconstructed == expected
    missing = sorted({tid for tid in tokens if not tokenizer.vocab.has_id(tid)})

    errors = []
    if not is_valid:
        errors.append("round-trip validation failed")
    if missing:
        errors.append(f"token ids missing from vocabulary: {missing}")

    return ValidationResult(
        is_valid=is_valid,
        original_text=text,
        reconstructed_text=reconstructed,
        ids_cover_ok=not missing,
        errors=errors,
    )


__all__ = ["ValidationResult", "validate_round_trip"]
