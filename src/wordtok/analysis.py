"""Per-text tokenizer metrics and vocabulary composition."""

from collections import Counter
from dataclasses import dataclass, field
import time
from typing import TYPE_CHECKING

from .types import TokenId

if TYPE_CHECKING:
    from .tokenizer import BPETokenizer


@dataclass
class TokenizerResult:
    """Tokens for one text along with quality metrics. Times are in seconds."""

    tokens: list[TokenId]
    compression_ratio: float
    vocabulary_efficiency: float
    training_secs: float
    tokenization_secs: float


@dataclass
class VocabularyAnalysis:
    """Breakdown of a trained vocabulary; special tokens are excluded from lengths."""

    total_tokens: int
    special_tokens: int
    character_tokens: int = 0
    subword_tokens: int = 0
    merge_operations: int = 0
    average_token_length: float = 0.0
    # token length -> number of tokens of that length
    token_length_distribution: dict[int, int] = field(default_factory=dict)


def tokenizer_result(tokenizer: "BPETokenizer", text: str) -> TokenizerResult:
    """Tokenize ``text`` and report compression and vocabulary usage."""
    start = time.perf_counter()
    tokens = tokenizer.tokenize(text)
    elapsed = time.perf_counter() - start

    stats = tokenizer.stats
    return TokenizerResult(
        tokens=tokens,
        compression_ratio=len(text) / len(tokens) if tokens else 0.0,
        vocabulary_efficiency=len(tokenizer.vocab) / tokenizer.config.vocab_size,
        training_secs=stats.training_secs if stats else 0.0,
        tokenization_secs=elapsed,
    )


def vocabulary_analysis(tokenizer: "BPETokenizer") -> VocabularyAnalysis:
    specials = set(tokenizer.config.special_tokens)
    analysis = VocabularyAnalysis(
        total_tokens=len(tokenizer.vocab),
        special_tokens=len(specials),
        merge_operations=len(tokenizer.merges),
    )

    lengths: Counter[int] = Counter()
    for tok, _ in tokenizer.vocab.tokens():
        if tok in specials:
            continue
        lengths[len(tok)] += 1
        if len(tok) == 1:
            analysis.character_tokens += 1
        else:
            analysis.subword_tokens += 1

    n_regular = sum(lengths.values())
    if n_regular:
        analysis.average_token_length = (
            sum(length * n for length, n in lengths.items()) / n_regular
        )
    analysis.token_length_distribution = dict(sorted(lengths.items()))
    return analysis


__all__ = [
    "TokenizerResult",
    "VocabularyAnalysis",
    "tokenizer_result",
    "vocabulary_analysis",
]
