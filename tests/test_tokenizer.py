"""Unit tests for WordTok training, encode/decode and edge cases."""

import logging

import pytest

import wordtok as wtok
from wordtok.errors import ConfigError, InvalidInputError, NotTrainedError


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tokenizer():
    """Return a tokenizer trained on a tiny repetitive corpus."""
    tok = wtok.BPETokenizer()
    tok.train("hello world hello world")
    return tok


@pytest.fixture
def sentence_tokenizer():
    """Return a tokenizer trained on a sentence with repeated subwords."""
    tok = wtok.get_tokenizer("demo")
    tok.train("the quick brown fox jumps over the lazy dog the end the fox")
    return tok


# Training
# ---------------------------------------------------------------------------


def test_first_merge_is_most_frequent_pair():
    """The first learned merge is the most frequent adjacent pair."""
    tok = wtok.BPETokenizer(min_freq=2)
    tok.train("aaabdaaabac")
    assert tok.export_vocabulary()["merges"][0] == ["a", "a"]


def test_ids_assigned_in_introduction_order():
    """Special tokens, sorted characters and the end marker get dense ids in order."""
    tok = wtok.BPETokenizer()
    tok.train("ba ab")
    vocab = tok.vocab.to_dict()
    assert vocab["<pad>"] == 0
    assert vocab["<unk>"] == 1
    assert vocab["<s>"] == 2
    assert vocab["</s>"] == 3
    assert vocab["a"] == 4
    assert vocab["b"] == 5
    assert vocab["</w>"] == 6
    # ids are dense
    assert sorted(vocab.values()) == list(range(len(vocab)))


def test_merged_tokens_follow_merge_order(tokenizer):
    """Merged tokens take ids after the base vocabulary in merge order."""
    base = len(tokenizer.config.special_tokens) + len("dehlorw") + 1
    for offset, (left, right) in enumerate(tokenizer.merges):
        assert tokenizer.vocab.id_of(left + right) == base + offset


def test_ties_are_broken_lexicographically():
    """Equally frequent pairs merge in lexicographic order."""
    tok = wtok.BPETokenizer()
    tok.train("cd cd ab ab")
    assert tok.merges[0] == ("a", "b")


def test_vocab_size_cap_respected():
    """Merging stops once the vocabulary reaches vocab_size."""
    tok = wtok.BPETokenizer(vocab_size=15)
    tok.train("hello world hello world")
    # 4 special + 7 characters + end marker, then merges up to the cap
    assert tok.vocab_size() == 15
    assert len(tok.merges) == 3


def test_base_vocab_over_cap_is_kept_and_warned(caplog):
    """A base vocabulary larger than vocab_size is kept whole and logged."""
    tok = wtok.BPETokenizer(vocab_size=5)
    with caplog.at_level(logging.WARNING):
        tok.train("hello world")
    # 4 special + 7 characters + end marker
    assert tok.vocab_size() == 12
    assert tok.merges == []
    assert "exceeds vocab size 5" in caplog.text
    assert tok.detokenize(tok.tokenize("hello world")) == "hello world"


def test_base_vocab_within_cap_does_not_warn(caplog):
    """No cap warning is logged when the base vocabulary fits."""
    with caplog.at_level(logging.WARNING):
        wtok.BPETokenizer().train("hello world")
    assert "exceeds vocab size" not in caplog.text


def test_max_merges_cap_respected():
    """No more than max_merges merges are learned."""
    tok = wtok.BPETokenizer(max_merges=2)
    tok.train("hello world hello world")
    assert len(tok.merges) == 2


def test_min_freq_stops_training():
    """Training stops when the best pair is rarer than min_freq."""
    tok = wtok.BPETokenizer(min_freq=3)
    tok.train("hello world hello world")
    assert tok.merges == []


def test_merges_never_produce_special_tokens():
    """A special token is never rebuilt by merging its characters."""
    tok = wtok.BPETokenizer()
    tok.train("<s> <s> <s>")
    assert ("<s", ">") not in tok.merges
    assert tok.vocab.id_of("<s>") == 2
    assert tok.detokenize(tok.tokenize("<s>")) == "<s>"


def test_training_stats(tokenizer):
    """Training statistics describe the corpus and learned vocabulary."""
    stats = tokenizer.stats
    assert stats.total_words == 4
    assert stats.unique_words == 2
    assert stats.vocab_size == tokenizer.vocab_size()
    assert stats.n_merges == len(tokenizer.merges)
    assert stats.compression_ratio == len("hello world hello world") / stats.vocab_size
    assert stats.training_secs >= 0


def test_retraining_discards_previous_vocabulary():
    """A second train call starts from an empty vocabulary."""
    tok = wtok.BPETokenizer()
    tok.train("aaa aaa")
    tok.train("bbb bbb")
    assert "a" not in tok.vocab
    assert "b" in tok.vocab


@pytest.mark.parametrize("text", ["", "   ", "\n\t "])
def test_empty_training_text_raises(tokenizer, text):
    """Empty or whitespace-only training text raises and leaves the tokenizer untrained."""
    with pytest.raises(InvalidInputError):
        tokenizer.train(text)
    # the reset already happened
    assert not tokenizer.is_trained()


# Logging
# ---------------------------------------------------------------------------


def test_verbose_training_logs_each_merge(caplog):
    """verbose=True logs every learned merge at INFO level."""
    tok = wtok.BPETokenizer()
    with caplog.at_level(logging.INFO, logger="wordtok.trainer"):
        tok.train("hello world hello world", verbose=True)
    merge_records = [r for r in caplog.records if r.getMessage().startswith("merge ")]
    assert len(merge_records) == len(tok.merges)
    assert merge_records[0].getMessage().startswith("merge 1:")
    assert all(r.levelno == logging.INFO for r in merge_records)


def test_quiet_training_logs_merges_at_debug(caplog):
    """Without verbose, merges are logged at DEBUG only."""
    with caplog.at_level(logging.INFO, logger="wordtok.trainer"):
        wtok.BPETokenizer().train("hello world hello world")
    assert "merge 1:" not in caplog.text


def test_train_logs_elapsed_time(caplog):
    """train is timed and the elapsed time is logged."""
    with caplog.at_level(logging.INFO, logger="wordtok._decorators"):
        wtok.BPETokenizer().train("hello world")
    assert "train completed in" in caplog.text


def test_failed_train_still_logs_elapsed_time(caplog):
    """The elapsed time is logged even when training raises."""
    with caplog.at_level(logging.INFO, logger="wordtok._decorators"):
        with pytest.raises(InvalidInputError):
            wtok.BPETokenizer().train("")
    assert "train completed in" in caplog.text


# Encode / decode
# ---------------------------------------------------------------------------


def test_roundtrip_hello_world(tokenizer):
    """Decoding the tokens of a training sentence gives it back."""
    tokens = tokenizer.tokenize("hello world")
    assert tokenizer.detokenize(tokens) == "hello world"


def test_fully_merged_words_are_single_tokens(tokenizer):
    """Frequent words collapse into one token each."""
    assert len(tokenizer.tokenize("hello world")) == 2


def test_roundtrip_without_merges():
    """Character-level tokens still round-trip when nothing was merged."""
    tok = wtok.BPETokenizer()
    tok.train("hello world")
    assert tok.merges == []
    assert tok.detokenize(tok.tokenize("hello world")) == "hello world"


def test_roundtrip_normalized_sentence(sentence_tokenizer):
    """An unseen arrangement of known words round-trips."""
    text = "the lazy fox jumps over the quick brown dog"
    assert sentence_tokenizer.detokenize(sentence_tokenizer.tokenize(text)) == text


def test_tokenize_preserves_word_order(tokenizer):
    """Words are encoded one after another in input order."""
    hello = tokenizer.tokenize("hello")
    world = tokenizer.tokenize("world")
    assert tokenizer.tokenize("world hello") == world + hello


def test_tokenize_lowercases_and_ignores_extra_whitespace(tokenizer):
    """Case and whitespace runs do not change the encoding."""
    assert tokenizer.tokenize("  HELLO \n\t World ") == tokenizer.tokenize("hello world")


def test_ids_are_covered_by_vocabulary(sentence_tokenizer):
    """Every produced id exists in the exported vocabulary."""
    exported = sentence_tokenizer.export_vocabulary()
    ids = set(exported["vocabulary"].values())
    tokens = sentence_tokenizer.tokenize("the quick brown fox jumps over the lazy dog")
    assert all(tid in ids for tid in tokens)


def test_tokenize_empty_string(tokenizer):
    """Empty text encodes to no tokens."""
    assert tokenizer.tokenize("") == []


def test_tokenize_before_training_raises():
    """Encoding needs a trained vocabulary."""
    with pytest.raises(NotTrainedError):
        wtok.BPETokenizer().tokenize("hello")


def test_unknown_characters_map_to_unknown_token(tokenizer):
    """Unseen characters encode as the unknown token."""
    unk = tokenizer.vocab.id_of("<unk>")
    tokens = tokenizer.tokenize("hez")
    assert unk in tokens
    assert len(tokens) == 4
    # the unknown token is a special token and is dropped on decode
    assert tokenizer.detokenize(tokens) == "he"


def test_tokenize_records_elapsed_time(tokenizer):
    """tokenize stores its own duration."""
    tokenizer.tokenize("hello")
    assert tokenizer.last_tokenization_secs is not None


def test_detokenize_empty(tokenizer):
    """No ids decode to the empty string."""
    assert tokenizer.detokenize([]) == ""


def test_detokenize_unknown_id_is_skipped(tokenizer, caplog):
    """An id missing from the vocabulary is skipped with a warning."""
    with caplog.at_level(logging.WARNING):
        assert tokenizer.detokenize([999999]) == ""
    assert "999999" in caplog.text


def test_detokenize_skips_unknown_id_mid_sequence(tokenizer, caplog):
    """Skipping an unknown id keeps the surrounding words intact."""
    tokens = tokenizer.tokenize("hello world")
    with caplog.at_level(logging.WARNING):
        assert tokenizer.detokenize([tokens[0], 999999, tokens[1]]) == "hello world"


def test_detokenize_skips_special_tokens(tokenizer):
    """Special tokens are dropped on decode."""
    tokens = tokenizer.tokenize("hello world")
    bos, eos = tokenizer.vocab.id_of("<s>"), tokenizer.vocab.id_of("</s>")
    assert tokenizer.detokenize([bos, *tokens, eos]) == "hello world"


def test_detokenize_flushes_trailing_buffer(tokenizer):
    """Characters without an end marker are still emitted."""
    h = tokenizer.vocab.id_of("h")
    e = tokenizer.vocab.id_of("e")
    assert tokenizer.detokenize([h, e]) == "he"


# Batch encoding
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("mode", ["auto", "batch", "off"])
def test_tokenize_batch_matches_single(sentence_tokenizer, mode):
    """Every parallel mode gives the same result as encoding one by one."""
    texts = ["the fox", "the lazy dog", "quick end"]
    expected = [sentence_tokenizer.tokenize(t) for t in texts]
    assert (
        sentence_tokenizer.tokenize_batch(texts, num_workers=2, parallel_mode=mode)
        == expected
    )


def test_tokenize_batch_empty(tokenizer):
    """An empty batch encodes to an empty list."""
    assert tokenizer.tokenize_batch([]) == []


def test_tokenize_batch_unknown_mode(tokenizer):
    """An unknown parallel mode raises ConfigError."""
    with pytest.raises(ConfigError):
        tokenizer.tokenize_batch(["hello"], parallel_mode="chunk")


def test_tokenize_batch_before_training_raises():
    """Batch encoding needs a trained vocabulary."""
    with pytest.raises(NotTrainedError):
        wtok.BPETokenizer().tokenize_batch(["hello"])
