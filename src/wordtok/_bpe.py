"""
Core Byte Pair Encoding (BPE) operations over word symbol sequences.
"""

from collections import Counter
from collections.abc import Iterable
from typing import Final

from .types import Symbol, SymbolPair, SymbolSequence, WordFreqs

END_OF_WORD: Final[Symbol] = "</w>"


def word_to_symbols(word: str) -> SymbolSequence:
    """Split a word into single-character symbols terminated by the end-of-word marker."""
    return (*word, END_OF_WORD)


def build_word_freqs(words: Iterable[str]) -> WordFreqs:
    """
    Build the word frequency table.

    Identical words collapse into one entry keyed by their initial symbol
    sequence, with the number of occurrences as value.
    """
    freqs: WordFreqs = {}
    for word in words:
        symbols = word_to_symbols(word)
        freqs[symbols] = freqs.get(symbols, 0) + 1
    return freqs


def bpe_freqs(word_freqs: WordFreqs) -> Counter[SymbolPair]:
    """
    Compute weighted frequencies of every adjacent symbol pair.

    Each occurrence of a pair inside a word contributes the word's frequency,
    so a pair seen twice in a word seen three times counts six.
    """
    counts: Counter[SymbolPair] = Counter()
    for symbols, freq in word_freqs.items():
        for pair in zip(symbols, symbols[1:]):
            counts[pair] += freq
    return counts


def best_pair(
    counts: Counter[SymbolPair], reserved: frozenset[Symbol] = frozenset()
) -> tuple[SymbolPair, int] | None:
    """
    Select the most frequent pair.

    Ties are broken lexicographically on ``(left, right)``. Pairs whose
    concatenation would collide with a reserved symbol are never selected.

    :returns: The winning pair and its count, or ``None`` if no pair qualifies.
    """
    candidates = (
        (pair, count)
        for pair, count in counts.items()
        if pair[0] + pair[1] not in reserved
    )
    return min(candidates, key=lambda x: (-x[1], x[0]), default=None)


def bpe_merge(symbols: SymbolSequence, target: SymbolPair) -> SymbolSequence:
    """
    Merge all occurrences of a target pair into one symbol.

    Scans left to right and matches whole symbols only, so occurrences never
    overlap and the leftmost one wins (``a a a`` with ``(a, a)`` gives
    ``aa a``).
    """
    left, right = target
    merged = left + right
    newsyms: list[Symbol] = []

    i = 0
    n = len(symbols)
    while i < n:
        if i < n - 1 and symbols[i] == left and symbols[i + 1] == right:
            newsyms.append(merged)
            i += 2
        else:
            newsyms.append(symbols[i])
            i += 1

    return tuple(newsyms)


def apply_merge(word_freqs: WordFreqs, target: SymbolPair) -> WordFreqs:
    """
    Return a new frequency table with ``target`` merged in every word.

    Words that become identical after the merge have their counts summed.
    """
    merged: WordFreqs = {}
    for symbols, freq in word_freqs.items():
        newsyms = bpe_merge(symbols, target)
        merged[newsyms] = merged.get(newsyms, 0) + freq
    return merged
