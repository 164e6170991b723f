"""Tokenizer configuration."""

from dataclasses import asdict, dataclass, fields, replace
import logging
from typing import Any, Final

from ._bpe import END_OF_WORD
from .errors import ConfigError

log = logging.getLogger(__name__)

DEFAULT_SPECIAL_TOKENS: Final[tuple[str, ...]] = ("<pad>", "<unk>", "<s>", "</s>")


@dataclass(frozen=True)
class TokenizerConfig:
    """
    Immutable settings for one tokenizer.

    :param vocab_size: Target vocabulary size, special tokens included.
    :param special_tokens: Reserved strings given the lowest ids, in order.
    :param unknown_token: Special token substituted for out-of-vocabulary symbols.
    :param pad_token: Reserved padding token (not used by the core).
    :param min_freq: Minimum weighted pair count needed to accept a merge.
    :param max_merges: Hard cap on merge iterations.
    """

    vocab_size: int = 1000
    special_tokens: tuple[str, ...] = DEFAULT_SPECIAL_TOKENS
    unknown_token: str = "<unk>"
    pad_token: str = "<pad>"
    min_freq: int = 2
    max_merges: int = 500

    def __post_init__(self) -> None:
        # lists arrive from json snapshots and keyword overrides
        if not isinstance(self.special_tokens, tuple):
            object.__setattr__(self, "special_tokens", tuple(self.special_tokens))

        if self.vocab_size < 1:
            raise ConfigError(
                "vocab size must be positive", field="vocab_size", value=self.vocab_size
            )
        if self.min_freq < 1:
            raise ConfigError(
                "min freq must be at least 1", field="min_freq", value=self.min_freq
            )
        if self.max_merges < 0:
            raise ConfigError(
                "max merges must not be negative",
                field="max_merges",
                value=self.max_merges,
            )
        if any(not tok for tok in self.special_tokens):
            raise ConfigError(
                "special tokens must be non-empty strings",
                field="special_tokens",
                value=self.special_tokens,
            )
        if len(set(self.special_tokens)) != len(self.special_tokens):
            raise ConfigError(
                "duplicate special tokens",
                field="special_tokens",
                value=self.special_tokens,
            )
        if END_OF_WORD in self.special_tokens:
            raise ConfigError(
                "end-of-word marker is reserved",
                field="special_tokens",
                value=self.special_tokens,
            )
        if self.unknown_token not in self.special_tokens:
            raise ConfigError(
                "unknown token must be one of the special tokens",
                field="unknown_token",
                value=self.unknown_token,
            )

    def with_overrides(self, **overrides: Any) -> "TokenizerConfig":
        """
        Return a new validated config with ``overrides`` merged over this one.

        Keys that are not config fields are logged and ignored.
        """
        known = {f.name for f in fields(self)}
        accepted = {}
        for key, value in overrides.items():
            if key in known:
                accepted[key] = value
            else:
                log.warning(f"ignoring unknown config field: {key}")
        return replace(self, **accepted)

    def to_dict(self) -> dict[str, Any]:
        """Return the config as JSON-compatible types."""
        data = asdict(self)
        data["special_tokens"] = list(self.special_tokens)
        return data
