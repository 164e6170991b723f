"""Bidirectional token <-> id vocabulary."""

from collections.abc import Iterator, Mapping
import logging

from .errors import VocabularyError
from .types import TokenId

log = logging.getLogger(__name__)


class Vocabulary:
    """
    Bijective mapping between token strings and dense integer ids.

    Ids handed out by :meth:`add` are contiguous, starting at 0, in the order
    tokens are first introduced. Re-adding a known token is a no-op.
    """

    def __init__(self) -> None:
        self._tok_to_id: dict[str, TokenId] = {}
        self._id_to_tok: dict[TokenId, str] = {}

    @classmethod
    def from_mapping(cls, tok_to_id: Mapping[str, TokenId]) -> "Vocabulary":
        """
        Build a vocabulary from an existing token -> id mapping, keeping ids as is.

        :raises VocabularyError: If two tokens share an id or an id is negative.
        """
        vocab = cls()
        for tok, tid in tok_to_id.items():
            tid = int(tid)
            if tid < 0:
                raise VocabularyError("negative token id", invalid_id=tid, token=tok)
            if tid in vocab._id_to_tok:
                raise VocabularyError("duplicate token id", invalid_id=tid, token=tok)
            vocab._tok_to_id[tok] = tid
            vocab._id_to_tok[tid] = tok
        return vocab

    def add(self, token: str) -> TokenId:
        """Add ``token`` with the next free id unless present; return its id."""
        if token in self._tok_to_id:
            return self._tok_to_id[token]
        # max() rather than len() keeps imported sparse vocabularies collision free
        tid = max(self._id_to_tok, default=-1) + 1
        self._tok_to_id[token] = tid
        self._id_to_tok[tid] = token
        return tid

    def id_of(self, token: str) -> TokenId | None:
        return self._tok_to_id.get(token)

    def token_of(self, tid: TokenId) -> str | None:
        return self._id_to_tok.get(tid)

    def has_id(self, tid: TokenId) -> bool:
        return tid in self._id_to_tok

    def tokens(self) -> Iterator[tuple[str, TokenId]]:
        """Iterate ``(token, id)`` pairs in id order."""
        for tid in sorted(self._id_to_tok):
            yield self._id_to_tok[tid], tid

    def to_dict(self) -> dict[str, TokenId]:
        """Return a token -> id copy."""
        return dict(self._tok_to_id)

    def to_inverse_dict(self) -> dict[TokenId, str]:
        """Return an id -> token copy."""
        return dict(self._id_to_tok)

    def __len__(self) -> int:
        return len(self._tok_to_id)

    def __contains__(self, token: object) -> bool:
        return token in self._tok_to_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vocabulary):
            return NotImplemented
        return self._tok_to_id == other._tok_to_id

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self)})"
