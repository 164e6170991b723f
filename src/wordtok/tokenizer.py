"""
Word-level BPE tokenizer: training, encoding, decoding and serialization.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
import json
import logging
import os
import time
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Final

from ._bpe import END_OF_WORD
from ._codec import decode_ids, encode_text
from ._decorators import measure_time
from ._sanitise import render_symbol
from .analysis import (
    TokenizerResult,
    VocabularyAnalysis,
    tokenizer_result,
    vocabulary_analysis,
)
from .benchmark import BenchmarkResult, run_benchmark
from .config import TokenizerConfig
from .errors import ModelLoadError, NotTrainedError, VocabularyError
from .parallel import ParallelMode, ParallelStrategy
from .trainer import TrainingStats, train_bpe
from .types import MergeList, TokenId
from .validation import ValidationResult, validate_round_trip
from .vocab import Vocabulary

PREFIX: Final[str] = "WordTok"
try:
    _version = version("wordtok")
except PackageNotFoundError:
    _version = "dev"

VERSION: Final[str] = _version
MODEL_SUFFIX: Final[str] = ".model"
VOCAB_SUFFIX: Final[str] = ".vocab"

log = logging.getLogger(__name__)


class BPETokenizer:
    """
    Word-level BPE tokenizer.

    Owns its vocabulary, merge list and last training statistics. Every call
    to :meth:`train` starts from a clean state. Training must not run
    concurrently with any other call on the same instance; encoding and
    decoding a trained tokenizer are read-only and may run concurrently.
    """

    def __init__(self, config: TokenizerConfig | None = None, **overrides: Any) -> None:
        """
        :param config: Base configuration, defaults to :class:`TokenizerConfig`.
        :param overrides: Config fields to override, e.g. ``vocab_size=500``.
        """
        base = config or TokenizerConfig()
        self.config: TokenizerConfig = (
            base.with_overrides(**overrides) if overrides else base
        )
        self.vocab = Vocabulary()
        self.merges: MergeList = []
        self.stats: TrainingStats | None = None
        self.last_tokenization_secs: float | None = None

    def reset(self) -> None:
        """Discard the vocabulary, merge list and statistics."""
        self.vocab = Vocabulary()
        self.merges = []
        self.stats = None
        self.last_tokenization_secs = None

    def is_trained(self) -> bool:
        return len(self.vocab) > 0

    def vocab_size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        return len(self.vocab)

    @measure_time
    def train(self, text: str, verbose: bool = False) -> None:
        """
        Learn a vocabulary and merge list from ``text``.

        Prior state is discarded first, even when training fails.

        :param text: Training text; lowercased and whitespace-normalized.
        :param verbose: Log each learned merge at INFO level.
        :raises InvalidInputError: If ``text`` is empty or whitespace-only.
        """
        self.reset()
        result = train_bpe(text, self.config, verbose=verbose)

        self.vocab = result.vocab
        self.merges = result.merges
        self.stats = result.stats

        log.info(
            f"trained vocabulary of {len(self.vocab)} tokens with {len(self.merges)} merges"
        )

    def tokenize(self, text: str) -> list[TokenId]:
        """
        Encode ``text`` into token ids.

        :raises NotTrainedError: If the tokenizer has no vocabulary.
        """
        if not self.is_trained():
            raise NotTrainedError("tokenizer not trained, call train() first")

        start = time.perf_counter()
        tokens = encode_text(
            text, self.vocab, self.merges, self.vocab.id_of(self.config.unknown_token)
        )
        self.last_tokenization_secs = time.perf_counter() - start
        return tokens

    def tokenize_batch(
        self,
        texts: list[str],
        num_workers: int | None = None,
        parallel_mode: ParallelStrategy = "auto",
    ) -> list[list[TokenId]]:
        """
        Encode multiple texts, optionally across a thread pool.

        :param texts: Text inputs to encode.
        :param num_workers: Worker count for batch mode, defaults to CPU count.
        :param parallel_mode: One of ``"auto"``, ``"batch"`` or ``"off"``.
        :returns: Encoded token sequences in input order.
        :raises NotTrainedError: If the tokenizer has no vocabulary.
        :raises ConfigError: If ``parallel_mode`` is unknown.
        """
        mode = ParallelMode.get(parallel_mode)
        if not self.is_trained():
            raise NotTrainedError("tokenizer not trained, call train() first")

        if not texts:
            return []

        if num_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = max(1, num_workers)

        if mode is ParallelMode.OFF or (mode is ParallelMode.AUTO and len(texts) <= 1):
            return [self.tokenize(text) for text in texts]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self.tokenize, texts))

    def detokenize(self, ids: list[TokenId]) -> str:
        """
        Decode token ids into space-separated lowercase words.

        Unknown ids are skipped with a warning; special tokens are dropped.
        """
        if not ids:
            return ""
        return decode_ids(ids, self.vocab, frozenset(self.config.special_tokens))

    def validate_round_trip(self, text: str, normalize: bool = False) -> ValidationResult:
        """Check that detokenizing the tokens of ``text`` gives ``text`` back."""
        return validate_round_trip(self, text, normalize=normalize)

    def benchmark(self, texts: list[str]) -> BenchmarkResult:
        """Retrain and measure on each text; leaves the tokenizer trained on the last one."""
        return run_benchmark(self, texts)

    def tokenizer_result(self, text: str) -> TokenizerResult:
        return tokenizer_result(self, text)

    def vocabulary_analysis(self) -> VocabularyAnalysis:
        return vocabulary_analysis(self)

    def export_vocabulary(self) -> dict[str, Any]:
        """
        Return a JSON-serializable snapshot of the tokenizer state.

        Keys: ``version``, ``vocabulary`` (token -> id), ``reverse_vocabulary``
        (id as string -> token), ``merges`` (list of ``[left, right]``),
        ``config`` and ``stats`` (``None`` before training).
        """
        stats = None
        if self.stats is not None:
            stats = {
                **asdict(self.stats),
                "last_tokenization_secs": self.last_tokenization_secs,
            }

        return {
            "version": VERSION,
            "vocabulary": self.vocab.to_dict(),
            "reverse_vocabulary": {
                str(tid): tok for tid, tok in self.vocab.to_inverse_dict().items()
            },
            "merges": [[left, right] for left, right in self.merges],
            "config": self.config.to_dict(),
            "stats": stats,
        }

    def import_vocabulary(self, data: dict[str, Any]) -> None:
        """
        Replace the tokenizer state with a snapshot from :meth:`export_vocabulary`.

        Token ids are kept exactly. Config fields in the snapshot are merged over
        the current config.

        :raises ModelLoadError: If the vocabulary maps are missing or disagree.
        """
        if "vocabulary" not in data or "reverse_vocabulary" not in data:
            raise ModelLoadError("snapshot is missing vocabulary mappings")

        try:
            vocab = Vocabulary.from_mapping(data["vocabulary"])
            inverse = {int(tid): tok for tid, tok in data["reverse_vocabulary"].items()}
        except (VocabularyError, ValueError, TypeError) as e:
            raise ModelLoadError(f"invalid vocabulary mapping: {e}") from e

        if inverse != vocab.to_inverse_dict():
            raise ModelLoadError("vocabulary and reverse vocabulary disagree")

        try:
            merges: MergeList = [
                (str(left), str(right)) for left, right in data.get("merges") or []
            ]
        except (ValueError, TypeError) as e:
            raise ModelLoadError(f"invalid merge list: {e}") from e

        config = self.config.with_overrides(**(data.get("config") or {}))

        stats = None
        last_tokenization_secs = None
        if data.get("stats"):
            raw = dict(data["stats"])
            last_tokenization_secs = raw.pop("last_tokenization_secs", None)
            try:
                stats = TrainingStats(**raw)
            except TypeError as e:
                raise ModelLoadError(f"invalid training stats: {e}") from e

        # swap state only once the whole snapshot parsed
        self.config = config
        self.vocab = vocab
        self.merges = merges
        self.stats = stats
        self.last_tokenization_secs = last_tokenization_secs

        log.info(
            f"imported vocabulary of {len(self.vocab)} tokens with {len(self.merges)} merges"
        )

    def save(self, file_prefix: str) -> None:
        """
        Save tokenizer state to disk.

        Creates two files: a .model file holding the exported snapshot as JSON
        and a .vocab file with human-readable token derivations.

        :param file_prefix: Path prefix for output files.
        :raises NotTrainedError: If the tokenizer has not been trained yet.
        """
        if not self.is_trained():
            raise NotTrainedError("tokenizer must be trained before saving")
        log.info(f"saving tokenizer to {file_prefix}")
        self._save_model(file_prefix)
        self._save_vocab(file_prefix)
        log.info("tokenizer saved successfully")

    def load(self, model_filename: str) -> None:
        """
        Load tokenizer state from a .model file.

        :param model_filename: Path to the .model file.
        :raises ModelLoadError: If the file does not exist, extension is not
            .model, content is not a snapshot or the version differs.
        """
        path = Path(model_filename)

        if not path.exists():
            raise ModelLoadError("model filepath does not exist", model_path=str(path))

        if path.suffix != MODEL_SUFFIX:
            raise ModelLoadError("expected .model file", model_path=str(path))

        log.info(f"loading model from {path}")

        with path.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ModelLoadError(
                    f"model file is not valid json: {e}", model_path=str(path)
                ) from e

        if not isinstance(data, dict) or data.get("format") != PREFIX:
            raise ModelLoadError("not a wordtok model file", model_path=str(path))

        model_ver = data.get("version")
        if model_ver != VERSION:
            raise ModelLoadError(
                "model version mismatch", version_mismatch=(str(model_ver), VERSION)
            )

        self.import_vocabulary(data)

    def _save_model(self, file_prefix: str) -> None:
        """Persist the exported snapshot to a .model file."""
        model_path = Path(file_prefix).with_suffix(MODEL_SUFFIX)
        # create directory if does not exist
        model_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving model to {model_path}")

        with model_path.open("w", encoding="utf-8", newline="\n") as f:
            json.dump(
                {"format": PREFIX, **self.export_vocabulary()},
                f,
                ensure_ascii=False,
                indent=2,
            )

    def _save_vocab(self, file_prefix: str) -> None:
        """Persist human-readable token representations to a .vocab file."""
        vocab_path = Path(file_prefix).with_suffix(VOCAB_SUFFIX)
        vocab_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving vocab to {vocab_path}")

        # first merge that produced each token
        derivations: dict[str, tuple[str, str]] = {}
        for left, right in self.merges:
            derivations.setdefault(left + right, (left, right))

        specials = set(self.config.special_tokens)

        with vocab_path.open("w", encoding="utf-8", newline="\n") as f:
            for tok, tid in self.vocab.tokens():
                subword = render_symbol(tok)
                if tok in specials:
                    f.write(f"ST [{tid}] {subword}\n")
                elif tok in derivations and tok != END_OF_WORD:
                    left, right = derivations[tok]
                    f.write(
                        f"[{tid}] [{render_symbol(left)}][{render_symbol(right)}] -> {subword}\n"
                    )
                else:
                    # single character or the end-of-word marker: no merging
                    f.write(f"[{tid}] {subword}\n")
