#!/usr/bin/env python3
"""
Comparison harness: naive truncation vs. bias-reduced compression.
"""
from __future__ import annotations

from collections import Counter
from typing import Callable, Iterable

from int_compress import compress_int, fls, InvalidBitCount

def truncate_int(value: int, bit_count: int) -> int:
    """Keep the top `bit_count` bits of `value` and zero the rest."""
    if bit_count <= 0:
        raise InvalidBitCount(f"bit_count must be positive, got {bit_count}")
    if value < 0:
        raise ValueError("Value must be non-negative")
    shift = max(fls(value) - bit_count, 0)
    return (value >> shift) << shift

# Keep method list in required order
METHODS = [
    ("trunc", truncate_int),
    ("compress", compress_int),
]

def mean_bias(fn: Callable[[int, int], int], values: Iterable[int], bit_count: int) -> float:
    """Average signed error `fn(v) - v`; 0 means no systematic bias."""
    total = 0
    count = 0
    for v in values:
        total += fn(v, bit_count) - v
        count += 1
    if not count:
        raise ValueError("values must not be empty")
    return total / count

def bucket_sizes(fn: Callable[[int, int], int], values: Iterable[int], bit_count: int) -> dict[int, int]:
    """Number of inputs mapped to each distinct output."""
    return dict(Counter(fn(v, bit_count) for v in values))

def truncate(s: str, max_len: int) -> str:
    if len(s) <= max_len:
        return s
    if max_len < 4:
        return s[:max_len]
    return s[: max_len - 3] + "..."

def print_header(title: str, bit_count: int):
    method_headers = " | ".join(f" {name:<20}" for name, _ in METHODS)
    title = f"=== {title} (bit_count={bit_count}) ==="
    print(f"\n{title:<50} | {method_headers}")
    print("-" * (50 + 3 + len(method_headers)))

def print_row(v: int, bit_count: int):
    pieces = []
    for name, fn in METHODS:
        out = fn(v, bit_count)
        pieces.append(f"{out:>12} {out - v:>+8}")
    print(f"{truncate(f'{v} ({v:b})', 48):<50} : " + " : ".join(f"{p:<21}" for p in pieces))

def print_bias(title: str, values: list[int], bit_count: int):
    pieces = []
    for name, fn in METHODS:
        bias = mean_bias(fn, values, bit_count)
        keys = len(bucket_sizes(fn, values, bit_count))
        pieces.append(f"{name}: bias {bias:>+12.3f} keys {keys:>6}")
    print(f"{truncate(title, 38):<40} | " + " | ".join(pieces))

if __name__ == "__main__":
    import random
    random.seed(876543)

    print_header("Single numbers", 3)
    for n in range(0, 41):
        print_row(n, 3)

    print_header("Powers of two and neighbours", 2)
    for n in range(1, 65):
        for v in ((1 << n) - 1, 1 << n, (1 << n) + 1):
            print_row(v, 2)

    print_header("Random counts", 4)
    for v in sorted(int(16 * random.paretovariate(1.2)) for _ in range(30)):
        print_row(v, 4)

    print(f"\n=== Mean bias and number of distinct keys ===")
    datasets = [
        ("range(1024)", list(range(1024))),
        ("range(100000)", list(range(100000))),
        ("pareto counts", [int(random.paretovariate(1.5)) for _ in range(100000)]),
        ("exponential counts", [int(random.expovariate(0.001)) for _ in range(100000)]),
        ("wide random", [random.getrandbits(random.randint(0, 48)) for _ in range(100000)]),
    ]
    for bit_count in (1, 2, 3, 4, 8):
        print(f"\n    bit_count = {bit_count}")
        for title, values in datasets:
            print_bias(title, values, bit_count)
