"""Train a word-level BPE tokenizer and save it to disk."""

import argparse
import logging
import time
from pathlib import Path

from wordtok import get_tokenizer

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"

# Configure logging to show INFO level and above.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)


def load_text(path: Path | None, num_docs: int) -> str:
    """Read training text from a file, or from the first `num_docs` dataset rows."""
    if path is not None:
        return path.read_text(encoding="utf-8")

    from datasets import load_dataset

    print(f"Loading {HF_DATASET} …")
    ds = load_dataset(HF_DATASET, split="train")
    return " ".join(ds[:num_docs]["text"])


def main() -> None:
    """Train a tokenizer and write <out>.model and <out>.vocab."""
    parser = argparse.ArgumentParser(description="Train a WordTok BPE tokenizer.")
    parser.add_argument(
        "--file", type=Path, default=None, help="Training text file (default: dataset)."
    )
    parser.add_argument(
        "--num-docs",
        type=int,
        default=100,
        help="Dataset documents to train on when no file is given (default: 100).",
    )
    parser.add_argument("--vocab-size", type=int, default=1000)
    parser.add_argument("--min-freq", type=int, default=2)
    parser.add_argument("--max-merges", type=int, default=500)
    parser.add_argument(
        "--out", type=str, default="models/wordtok", help="Output path prefix."
    )
    parser.add_argument("--verbose", action="store_true", help="Log every merge.")
    args = parser.parse_args()

    text = load_text(args.file, args.num_docs)
    print(f"number of chars {len(text):,}")

    tok = get_tokenizer(
        vocab_size=args.vocab_size,
        min_freq=args.min_freq,
        max_merges=args.max_merges,
    )
    start = time.perf_counter()
    tok.train(text, verbose=args.verbose)
    elapsed = time.perf_counter() - start

    stats = tok.stats
    print(f"✓ Training completed in {elapsed:.3f}s")
    print(f"✓ Merges created: {stats.n_merges:,}")
    print(f"✓ Final vocab size: {stats.vocab_size:,}")
    print(f"✓ Words: {stats.total_words:,} ({stats.unique_words:,} unique)")

    tok.save(args.out)
    print(f"✓ Saved to {args.out}.model")


if __name__ == "__main__":
    main()
