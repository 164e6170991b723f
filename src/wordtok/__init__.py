"""WordTok: word-level byte-pair encoding tokenizer."""

from .analysis import TokenizerResult, VocabularyAnalysis
from .benchmark import BenchmarkResult
from .config import TokenizerConfig
from .errors import (
    ConfigError,
    InvalidInputError,
    ModelLoadError,
    NotTrainedError,
    VocabularyError,
    WordTokError,
)
from .factory import from_pretrained, get_tokenizer, list_presets
from .parallel import list_parallel_modes
from .tokenizer import BPETokenizer
from .trainer import TrainingStats
from .validation import ValidationResult
from .vocab import Vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wordtok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "BPETokenizer",
    "TokenizerConfig",
    "Vocabulary",
    "TrainingStats",
    "ValidationResult",
    "BenchmarkResult",
    "TokenizerResult",
    "VocabularyAnalysis",
    "WordTokError",
    "ConfigError",
    "InvalidInputError",
    "NotTrainedError",
    "VocabularyError",
    "ModelLoadError",
    "get_tokenizer",
    "from_pretrained",
    "list_presets",
    "list_parallel_modes",
]
