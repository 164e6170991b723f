"""Batch train/encode/validate benchmarking."""

from dataclasses import dataclass, field
import logging
import time
from typing import TYPE_CHECKING

from .validation import validate_round_trip

if TYPE_CHECKING:
    from .tokenizer import BPETokenizer

log = logging.getLogger(__name__)

# characters of a failing text quoted in its error message
_PREVIEW_CHARS = 50


@dataclass
class BenchmarkResult:
    """Aggregated metrics over a batch of texts. Times are in seconds."""

    total_texts: int
    average_training_secs: float = 0.0
    average_tokenization_secs: float = 0.0
    # input characters per produced token
    average_compression_ratio: float = 0.0
    # percentage of texts passing round-trip validation
    round_trip_accuracy: float = 0.0
    errors: list[str] = field(default_factory=list)


def run_benchmark(tokenizer: "BPETokenizer", texts: list[str]) -> BenchmarkResult:
    """
    Retrain ``tokenizer`` on each text in turn and measure it.

    For every text: train, tokenize, compute the compression ratio and run
    round-trip validation. A failing text is recorded in ``errors`` and the
    batch continues. Averages are taken over the whole batch, so failed texts
    count as zero. The tokenizer is left trained on the last text.
    """
    result = BenchmarkResult(total_texts=len(texts))
    if not texts:
        return result

    total_train = 0.0
    total_tokenize = 0.0
    total_ratio = 0.0
    n_valid = 0

    for text in texts:
        try:
            start = time.perf_counter()
            tokenizer.train(text)
            total_train += time.perf_counter() - start

            start = time.perf_counter()
            tokens = tokenizer.tokenize(text)
            total_tokenize += time.perf_counter() - start

            if tokens:
                total_ratio += len(text) / len(tokens)

            validation = validate_round_trip(tokenizer, text)
            if validation.is_valid:
                n_valid += 1
            else:
                result.errors.append(
                    f"round-trip failed for text: {text[:_PREVIEW_CHARS]}..."
                )
        except Exception as e:
            log.exception(f"benchmark text failed: {e}")
            result.errors.append(f"error processing text: {e}")

    n = len(texts)
    result.average_training_secs = total_train / n
    result.average_tokenization_secs = total_tokenize / n
    result.average_compression_ratio = total_ratio / n
    result.round_trip_accuracy = n_valid / n * 100

    log.info(
        f"benchmarked {n} texts: {result.round_trip_accuracy:.1f}% round-trip accuracy, "
        f"{len(result.errors)} errors"
    )
    return result


__all__ = ["BenchmarkResult", "run_benchmark"]
