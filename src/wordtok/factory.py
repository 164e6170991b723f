"""Factory functions for creating tokenizers."""

from typing import Any, Final, Literal

from .config import TokenizerConfig
from .errors import ConfigError
from .tokenizer import BPETokenizer

PresetName = Literal["default", "demo"]

_PRESETS: Final[dict[str, TokenizerConfig]] = {
    "default": TokenizerConfig(),
    # small vocabulary for interactive demos
    "demo": TokenizerConfig(vocab_size=500),
}


def list_presets() -> list[str]:
    """Return available configuration preset names."""
    return list(_PRESETS.keys())


def get_tokenizer(preset: PresetName = "default", **overrides: Any) -> BPETokenizer:
    """
    Create an untrained tokenizer from a named preset.

    :param preset: Preset name: "default" (vocab size 1000) or "demo" (500).
    :param overrides: Config fields to override on top of the preset.
    :return: Configured tokenizer instance.
    :raises ConfigError: If the preset is unknown or an override is invalid.

    .. code-block:: python

        tokenizer = get_tokenizer("demo")
        tokenizer = get_tokenizer(min_freq=3, max_merges=200)
    """
    if preset not in _PRESETS:
        raise ConfigError(
            "unknown preset", field="preset", value=preset, available=list_presets()
        )
    return BPETokenizer(_PRESETS[preset], **overrides)


def from_pretrained(model_path: str) -> BPETokenizer:
    """
    Load a saved tokenizer from disk.

    :param model_path: Path to the .model file.
    :return: Loaded tokenizer with vocabulary, merges and configuration.
    :raises ModelLoadError: If the file is missing, malformed or from another version.

    .. code-block:: python

        tokenizer = from_pretrained("path/to/model.model")
        ids = tokenizer.tokenize("hello world")
    """
    tokenizer = BPETokenizer()
    tokenizer.load(model_path)
    return tokenizer
