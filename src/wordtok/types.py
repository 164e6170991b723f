"""
Core types for word-level BPE tokenization.
"""

type TokenId = int
type Symbol = str
type SymbolPair = tuple[Symbol, Symbol]
type SymbolSequence = tuple[Symbol, ...]
type WordFreqs = dict[SymbolSequence, int]
type MergeList = list[SymbolPair]
