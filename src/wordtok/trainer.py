"""Standalone BPE training module."""

from dataclasses import dataclass, field
import logging
import time

from ._bpe import END_OF_WORD, apply_merge, best_pair, bpe_freqs, build_word_freqs
from ._sanitise import normalize_text
from .config import TokenizerConfig
from .errors import InvalidInputError
from .types import MergeList
from .vocab import Vocabulary

log = logging.getLogger(__name__)


@dataclass
class TrainingStats:
    """Statistics from one training run. Times are in seconds."""

    training_secs: float
    vocab_size: int
    n_merges: int
    unique_words: int
    total_words: int
    # input characters per vocabulary entry
    compression_ratio: float


@dataclass
class BPETrainingResult:
    """Results from one BPE training run."""

    vocab: Vocabulary
    merges: MergeList = field(default_factory=list)
    stats: TrainingStats | None = None


def train_bpe(
    text: str, config: TokenizerConfig, verbose: bool = False
) -> BPETrainingResult:
    """
    Learn a vocabulary and an ordered merge list from ``text``.

    The text is lowercased and whitespace-normalized, then split into words.
    Merges are learned until the vocabulary reaches ``config.vocab_size``,
    ``config.max_merges`` merges were made, or no pair reaches
    ``config.min_freq``.

    :param text: Raw training text.
    :param config: Tokenizer settings for this run.
    :param verbose: Log each learned merge at INFO instead of DEBUG.
    :returns: Vocabulary, merge list and training statistics.
    :raises InvalidInputError: If ``text`` is empty or whitespace-only.
    """
    start = time.perf_counter()

    normalized = normalize_text(text)
    if not normalized:
        raise InvalidInputError("training text cannot be empty")
    words = normalized.split(" ")

    vocab = Vocabulary()
    for tok in config.special_tokens:
        vocab.add(tok)

    word_freqs = build_word_freqs(words)
    unique_words = len(word_freqs)

    chars = sorted({c for word in words for c in word})
    for c in chars:
        vocab.add(c)
    vocab.add(END_OF_WORD)

    if len(vocab) > config.vocab_size:
        log.warning(
            f"base vocabulary of {len(vocab)} tokens exceeds vocab size "
            f"{config.vocab_size}, no merges will be learned"
        )

    # merged symbols must never shadow a reserved entry
    reserved = frozenset((*config.special_tokens, END_OF_WORD))
    merges: MergeList = []

    while len(vocab) < config.vocab_size and len(merges) < config.max_merges:
        found = best_pair(bpe_freqs(word_freqs), reserved)
        if found is None:
            log.debug("no more symbol pairs to merge")
            break

        pair, count = found
        if count < config.min_freq:
            log.debug(
                f"best pair {pair} seen {count} times, below min freq {config.min_freq}"
            )
            break

        merges.append(pair)
        word_freqs = apply_merge(word_freqs, pair)
        mtok = vocab.add(pair[0] + pair[1])

        log.log(
            logging.INFO if verbose else logging.DEBUG,
            f"merge {len(merges)}: {pair} (count {count}) -> {mtok}",
        )

    if len(vocab) < config.vocab_size and len(merges) < config.max_merges:
        log.info(
            f"stopped after {len(merges)} merges with vocab size {len(vocab)} "
            f"(target {config.vocab_size})"
        )

    stats = TrainingStats(
        training_secs=time.perf_counter() - start,
        vocab_size=len(vocab),
        n_merges=len(merges),
        unique_words=unique_words,
        total_words=len(words),
        compression_ratio=len(text) / len(vocab),
    )

    return BPETrainingResult(vocab=vocab, merges=merges, stats=stats)


__all__ = ["TrainingStats", "BPETrainingResult", "train_bpe"]
