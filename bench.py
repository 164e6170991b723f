"""Benchmark per-text train/tokenize/validate on a slice of the Sci-Fi Gutenberg dataset.

Outputs a row with the columns:
  Texts | Vocab Size | Avg Training Time | Avg Tokenization Time |
  Avg Compression Ratio | Round-trip Accuracy
"""

import argparse
from pathlib import Path

from wordtok import BPETokenizer, from_pretrained, get_tokenizer

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"


def load_corpus(num_docs: int, max_chars: int) -> list[str]:
    """Load `num_docs` documents, each cut to `max_chars` characters."""
    from datasets import load_dataset

    print(f"Loading {HF_DATASET} (non-streaming) …")
    ds = load_dataset(HF_DATASET, split="train")
    return [doc[:max_chars] for doc in ds[:num_docs]["text"]]


def report_pretrained(tok: BPETokenizer, docs: list[str]) -> None:
    """Tokenize `docs` with an already trained model and print compression."""
    encoded = tok.tokenize_batch(docs)
    total_chars = sum(len(d) for d in docs)
    total_tokens = sum(len(seq) for seq in encoded)
    ratio = total_chars / total_tokens if total_tokens else 0.0
    valid = sum(tok.validate_round_trip(d, normalize=True).is_valid for d in docs)
    print(f"compression ratio: {ratio:.2f}x")
    print(f"normalized round-trip: {valid}/{len(docs)}")


def main() -> None:
    """Run the benchmark and print a markdown table row."""
    parser = argparse.ArgumentParser(description="Benchmark WordTok training and encoding.")
    parser.add_argument("--num-docs", type=int, default=20)
    parser.add_argument(
        "--max-chars",
        type=int,
        default=20_000,
        help="Characters kept per document (default: 20,000).",
    )
    parser.add_argument("--vocab-size", type=int, default=1000)
    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help="Optional .model path; measure that model instead of retraining per text.",
    )
    args = parser.parse_args()

    docs = load_corpus(args.num_docs, args.max_chars)
    if not docs:
        raise RuntimeError("No documents loaded from dataset.")

    if args.model is not None:
        report_pretrained(from_pretrained(str(args.model)), docs)
        return

    tok = get_tokenizer(vocab_size=args.vocab_size)
    result = tok.benchmark(docs)

    print()
    header = (
        f"| {'Texts':5} | {'Vocab Size':10} | {'Avg Training Time':17} "
        f"| {'Avg Tokenization Time':21} | {'Avg Compression Ratio':21} "
        f"| {'Round-trip Accuracy':19} |"
    )
    sep = (
        f"| {'-' * 5} | {'-' * 10} | {'-' * 17} "
        f"| {'-' * 21} | {'-' * 21} | {'-' * 19} |"
    )
    row = (
        f"| {result.total_texts:5} | {args.vocab_size:10,} "
        f"| {f'{result.average_training_secs:.3f} secs':17} "
        f"| {f'{result.average_tokenization_secs * 1000:.2f} ms':21} "
        f"| {f'{result.average_compression_ratio:.2f}x':21} "
        f"| {f'{result.round_trip_accuracy:.1f}%':19} |"
    )
    print(header)
    print(sep)
    print(row)
    print()
    for err in result.errors:
        print(f"  {err}")


if __name__ == "__main__":
    main()
