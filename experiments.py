# experiments.py
# Benchmarks for the Huffman text codec

"""
Huffman text codec experiments

Runs the full container round trip (build codes, encode, parse + validate +
decode) over synthetic text and reports timing and code efficiency

Outputs (in --outdir):
  - metrics.csv     (raw row per run per dataset)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 64 --exp2_max_kb 1024
  python experiments.py --outdir results --exp1_generators uniform_ascii,zipf64,english_like

Notes:
  sizes are in symbols (characters), not bytes
"""

from __future__ import annotations

import argparse
import csv
import logging
import math
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import matplotlib.pyplot as plt

import container
import huffman as huff

logger = logging.getLogger(__name__)

# Printable alphabet without line breaks, the container stores one entry per line
ALPHABET = "".join(chr(c) for c in range(32, 127))


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def shannon_entropy(ft: Dict[str, int]) -> float:
    total = sum(ft.values())
    return -sum((n / total) * math.log2(n / total) for n in ft.values())

def average_code_length(ft: Dict[str, int], code_table: huff.CodeTable) -> float:
    total = sum(ft.values())
    codes = code_table.by_symbol
    return sum(n * len(codes[s]) for s, n in ft.items()) / total


# Synthetic dataset generators

def _sample(chars: str, weights: List[float], size: int, rng: random.Random) -> str:
    return "".join(rng.choices(chars, weights=weights, k=size))

def gen_uniform(size: int, alphabet: int = len(ALPHABET), seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = ALPHABET[:alphabet]
    return "".join(rng.choice(chars) for _ in range(size))

def gen_repetitive(size: int, dominant: str = "A", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = ALPHABET.replace(dominant, "")
    return "".join(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 64, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = ALPHABET[:alphabet]
    weights = [1.0 / ((i + 1) ** s) for i in range(len(chars))]
    return _sample(chars, weights, size, rng)

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        ".,"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch in ".,":
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    return _sample(chars, weights, size, rng)

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform_ascii": lambda size, seed: gen_uniform(size, seed=seed),
    "uniform16": lambda size, seed: gen_uniform(size, alphabet=16, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "zipf32": lambda size, seed: gen_zipf_like(size, alphabet=32, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dom_frac=0.99, seed=seed),
    "single_symbol": lambda size, seed: "A" * size,
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown dataset generator {name!r}, choose from {sorted(GENERATOR_REGISTRY)}")
    return name, fn(max(1, size), seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    text_symbols: int
    run_id: int
    unique_symbols: int

    build_codes_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    container_chars: int
    encoded_bits: int
    bits_per_symbol: float
    entropy_bits: float
    compression_ratio: float  # encoded bits / (8 * utf-8 bytes of the text)

    correctness_ok: int  # 1 or 0


def run_one(text: str) -> MetricRow:
    ft = huff.frequency_table(text)

    t0 = now_ns()
    code_table = container.build_code_table(text)
    t1 = now_ns()

    data = container.write_container(text, code_table)
    t2 = now_ns()

    decoded = container.decode_text(data)
    t3 = now_ns()

    encoded_bits = sum(n * len(code_table.by_symbol[s]) for s, n in ft.items())
    build_ms = ns_to_ms(t1 - t0)
    encode_ms = ns_to_ms(t2 - t1)
    decode_ms = ns_to_ms(t3 - t2)

    return MetricRow(
        exp_name="",
        dataset_name="",
        text_symbols=len(text),
        run_id=0,
        unique_symbols=len(ft),
        build_codes_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        container_chars=len(data),
        encoded_bits=encoded_bits,
        bits_per_symbol=average_code_length(ft, code_table),
        entropy_bits=shannon_entropy(ft),
        compression_ratio=encoded_bits / max(1, 8 * len(text.encode("utf-8"))),
        correctness_ok=1 if decoded == text else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


SUMMARY_METRICS = ("bits_per_symbol", "entropy_bits", "compression_ratio",
                   "build_codes_ms", "encode_ms", "decode_ms", "total_ms")


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, text_symbols and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.text_symbols)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "text_symbols", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "text_symbols": size,
                "n_runs": len(items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in SUMMARY_METRICS:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(row)


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    plt.plot(x, [mean_for(d, "bits_per_symbol") for d in datasets], marker="o", label="huffman")
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="x", linestyle="--", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Average Code Length vs Entropy")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_bits_per_symbol.png", dpi=200)
    plt.close()

    plt.figure()
    for field, label in (("encode_ms", "encode"), ("decode_ms", "decode")):
        plt.plot(x, [mean_for(d, field) for d in datasets], marker="o", label=label)
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Time (ms)")
    plt.title("Experiment 1: Encode / Decode Time by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_time.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.text_symbols for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.text_symbols == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for field, label in (("build_codes_ms", "build codes"), ("encode_ms", "encode"), ("decode_ms", "decode")):
            plt.plot(sizes, [mean_size(s, field) for s in sizes], marker="o", label=label)
        plt.xlabel("Text Size (symbols)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Runtime vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_time_{dist}.png", dpi=200)
        plt.close()

        plt.figure()
        plt.plot(sizes, [mean_size(s, "compression_ratio") for s in sizes], marker="o")
        plt.xlabel("Text Size (symbols)")
        plt.ylabel("Encoded Bits / Original Bits")
        plt.title(f"Experiment 2: Compression Ratio vs Size ({dist})")
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_compression_ratio_{dist}.png", dpi=200)
        plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def size_steps(min_size: int, max_size: int) -> List[int]:
    sizes: List[int] = []
    s = max(1, min_size)
    while s <= max_size:
        sizes.append(s)
        s *= 2
    return sizes

def run_experiments(outdir: Path, runs: int, seed: int,
                    exp1_size: int, exp1_generators: List[str],
                    exp2_sizes: List[int], exp2_generators: List[str]) -> List[MetricRow]:
    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    for gen_name in exp1_generators:
        for run_id in range(1, runs + 1):
            dataset_name, text = generate_dataset(gen_name, exp1_size, seed + run_id)
            row = run_one(text)
            row.exp_name = "exp1_distribution"
            row.dataset_name = dataset_name
            row.run_id = run_id
            rows.append(row)

    # Experiment 2: size scaling (powers of 2)
    for gen_name in exp2_generators:
        for size in exp2_sizes:
            for run_id in range(1, runs + 1):
                dataset_name, text = generate_dataset(gen_name, size, seed + 10_000 + size + run_id)
                row = run_one(text)
                row.exp_name = "exp2_size_scaling"
                row.dataset_name = dataset_name
                row.run_id = run_id
                rows.append(row)

    safe_mkdir(outdir)
    write_csv(outdir / "metrics.csv", rows)
    group_summary(rows, outdir / "summary.csv")
    plot_experiment_1(rows, outdir)
    plot_experiment_2(rows, outdir)
    logger.debug("wrote %d metric rows to %s", len(rows), outdir)
    return rows

def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=64, help="Experiment 1 fixed text size in K symbols")
    ap.add_argument("--exp1_generators", type=str,
                    default="uniform_ascii,zipf64,repetitive90,english_like,single_symbol",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=1, help="Experiment 2 min size in K symbols (power-of-two growth)")
    ap.add_argument("--exp2_max_kb", type=int, default=512, help="Experiment 2 max size in K symbols (power-of-two growth)")
    ap.add_argument("--exp2_generators", type=str, default="uniform_ascii,zipf64,repetitive90",
                    help="Comma-separated dataset generator names for experiment 2")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    outdir = Path(args.outdir)
    rows = run_experiments(
        outdir,
        runs=args.runs,
        seed=args.seed,
        exp1_size=max(1, args.exp1_size_kb) * 1024,
        exp1_generators=[] if args.no_exp1 else parse_csv_list(args.exp1_generators),
        exp2_sizes=size_steps(args.exp2_min_kb * 1024, args.exp2_max_kb * 1024),
        exp2_generators=[] if args.no_exp2 else parse_csv_list(args.exp2_generators),
    )

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {outdir / 'metrics.csv'}")
    print(f"Wrote grouped summary to {outdir / 'summary.csv'}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
