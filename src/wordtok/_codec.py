"""
Stateless encode/decode between text and token ids.
"""

from collections.abc import Collection, Iterable
import logging

from ._bpe import END_OF_WORD, bpe_merge, word_to_symbols
from ._sanitise import split_words
from .types import MergeList, SymbolSequence, TokenId
from .vocab import Vocabulary

log = logging.getLogger(__name__)


def segment_word(word: str, merges: MergeList) -> SymbolSequence:
    """Apply every merge rule to ``word`` in training order."""
    symbols = word_to_symbols(word)
    for pair in merges:
        # merges can never grow a sequence, a single symbol is final
        if len(symbols) < 2:
            break
        symbols = bpe_merge(symbols, pair)
    return symbols


def encode_text(
    text: str, vocab: Vocabulary, merges: MergeList, unk_id: TokenId | None
) -> list[TokenId]:
    """
    Encode ``text`` into token ids, one word at a time in original order.

    Symbols missing from ``vocab`` become ``unk_id``; they are dropped when
    ``unk_id`` is ``None``.
    """
    tokens: list[TokenId] = []
    for word in split_words(text):
        for sym in segment_word(word, merges):
            tid = vocab.id_of(sym)
            if tid is None:
                tid = unk_id
            if tid is not None:
                tokens.append(tid)
    return tokens


def decode_ids(
    ids: Iterable[TokenId], vocab: Vocabulary, special_tokens: Collection[str]
) -> str:
    """
    Decode token ids back into space-separated words.

    A symbol ending in the end-of-word marker closes the current word. Special
    tokens contribute nothing. Unknown ids are skipped with a warning.
    """
    words: list[str] = []
    buf = ""

    for tid in ids:
        sym = vocab.token_of(tid)
        if sym is None:
            log.warning(f"skipping unknown token id: {tid}")
            continue

        if sym in special_tokens:
            continue

        if sym.endswith(END_OF_WORD):
            buf += sym[: -len(END_OF_WORD)]
            if buf:
                words.append(buf)
                buf = ""
        else:
            buf += sym

    if buf:
        words.append(buf)

    return " ".join(words)
