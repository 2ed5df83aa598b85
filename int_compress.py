#!/usr/bin/env python3

###############################################################################
#    Lossy magnitude compression of unsigned integers.
#
#    Keeps full resolution near zero and coarser resolution for big values,
#    e.g. to shrink the set of map keys / histogram buckets built from counts.
#
#    The scheme is:
#    - The highest `bit_count` bits of the input (the prefix) are kept as is.
#    - The remaining low bits (the suffix) are replaced by one of two patterns:
#        A: 1 0 0 ... 0   (only the top suffix bit set)
#        B: 0 1 1 ... 1   (complement of A, i.e. A - 1)
#    - B is used when the low bit of the prefix is 1, A otherwise.
#      With bit_count == 1 the prefix is always 1, so the low bit of the
#      suffix width (shift) selects the pattern instead.
#    - Values that fit into `bit_count` bits pass through unchanged.
#
#    Truncating the suffix to zero always rounds down. A lands half a step
#    above the bucket midpoint, B half a step below it, and neighbouring
#    buckets alternate between them, so the errors cancel on average.
#
#    Example, bit_count = 3:
#        input   67  0b100_0011
#        output  72  0b100_1000
#                      ^^^ prefix kept, suffix replaced by pattern A
#
#    All inputs with the same bit length and the same prefix map to the
#    same output.

WIDTHS = (8, 16, 32, 64)


class InvalidBitCount(ValueError):
    """bit_count must be a positive integer."""


def fls(n: int) -> int:
    """
    Find last set: 1-based index of the highest set bit, 0 for 0.

    Same as POSIX fls() and as `W - leading_zeros(n)` for any width W.
    """
    if n < 0:
        raise ValueError("Value must be non-negative")
    return n.bit_length()


def compress_int(value: int, bit_count: int, width: int | None = None) -> int:
    """
    Compress `value` to a representative sharing its top `bit_count` bits.

    `width` optionally declares the unsigned type (8/16/32/64 bits or any other
    positive width); `value` must then fit into it. A `bit_count` that is equal
    to or larger than the width makes every value pass through unchanged.
    """
    if bit_count <= 0:
        raise InvalidBitCount(f"bit_count must be positive, got {bit_count}")
    if value < 0:
        raise ValueError("Value must be non-negative")
    if width is not None:
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        if value >> width:
            raise ValueError(f"Value out of supported range (0..2^{width}-1)")

    high_bit_index = fls(value)
    if high_bit_index <= bit_count:
        return value

    shift = high_bit_index - bit_count
    prefix = value >> shift

    selector = shift if bit_count == 1 else prefix
    suffix = 1 << (shift - 1)  # A: 0b100...0
    if selector & 1:
        suffix -= 1  # B: 0b011...1

    return (prefix << shift) | suffix

###############################################################################
# Tests

if __name__ == "__main__":
    print(f"\n    bit_count = 3\n{'Number':<10} {'Bin':<12} {'Compressed':<12} {'Bin':<12}")
    for i in range(0, 41):
        c = compress_int(i, 3)
        print(f"{i:<10} {i:<12b} {c:<12} {c:<12b}")
        if i < 8:
            assert c == i, (i, c)
        else:
            shift = fls(i) - 3
            assert c >> shift == i >> shift, (i, c)

    # Worked example from the header
    assert compress_int(67, 3) == 72
    assert compress_int(0b1000011, 3) == 0b1001000

    # Known buckets
    for i in range(8, 10):
        assert compress_int(i, 3) == 9, i
    for i in range(10, 12):
        assert compress_int(i, 3) == 10, i
    for i in range(16, 20):
        assert compress_int(i, 3) == 18, i

    # bit_count == 1: pattern selected by shift parity
    print(f"\n    bit_count = 1\n{'Range':<24} {'Compressed':<12} {'Bin':<12}")
    for ii in range(1, 11):
        lo, hi = 1 << (ii - 1), (1 << ii) - 1
        c = compress_int(lo, 1)
        print(f"{f'{lo}..{hi}':<24} {c:<12} {c:<12b}")
        assert compress_int(hi, 1) == c, (lo, hi)

    # 64-bit value
    v = 123_039_843_249
    c = compress_int(v, 3, width=64)
    print(f"\n    64-bit\n{v} -> {c}")
    assert c == 128_849_018_879, c

    # Powers of two in each supported width
    for w in WIDTHS:
        for ii in range(w):
            i = 1 << ii
            c = compress_int(i, 4, width=w)
            assert c >> w == 0, (w, i, c)
            assert fls(c) == fls(i), (w, i, c)
        top = (1 << w) - 1
        assert compress_int(top, w, width=w) == top

    # Bias
    n = 1024
    mean = sum(compress_int(i, 2) for i in range(n)) / n
    print(f"\n    Mean of compress_int(i, 2) for i < {n}: {mean} (expected {(n - 1) / 2})")
    assert abs(mean - (n - 1) / 2) < 1e-6, mean

    # Errors
    for bad in (0, -1):
        try:
            compress_int(5, bad)
            assert False, "Expected InvalidBitCount"
        except InvalidBitCount as e:
            print(f"bit_count={bad} correctly raised: {e}")
    try:
        compress_int(256, 3, width=8)
        assert False, "Expected ValueError for out of range value"
    except ValueError as e:
        print(f"Out of range correctly raised: {e}")
