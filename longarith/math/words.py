"""Magnitude primitives on 32-bit word vectors.

A FixedPoint magnitude is stored as two word lists: the integer part with its
least-significant word first, and the fractional part with its
most-significant word first (left-justified). Most primitives here work on a
"flat" vector instead: the fractional words reversed followed by the integer
words, so the whole magnitude reads as one little-endian base-2^32 integer
scaled by 2^(32 * fraction_words).

Because fractional words are left-justified, two fractional parts of different
bit widths are aligned simply by zero-extending the shorter one at its
least-significant end until both have the same number of words.
"""

from __future__ import annotations

from collections.abc import Sequence

from longarith.constants import WORD_BITS, WORD_MASK


def words_for_bits(bits: int) -> int:
    """Number of 32-bit words needed to hold `bits` bits."""
    return (bits + WORD_BITS - 1) // WORD_BITS


def is_zero_words(words: Sequence[int]) -> bool:
    """True if every word is zero (an empty vector is zero)."""
    return not any(words)


# =============================================================================
# Single-word operations
# =============================================================================


def add_word(a: int, b: int, carry: int = 0) -> tuple[int, int]:
    """Add two words and an incoming carry.

    Returns:
        (sum word, outgoing carry)
    """
    total = a + b + carry
    return total & WORD_MASK, total >> WORD_BITS


def subtract_word(a: int, b: int, borrow: int = 0) -> tuple[int, int]:
    """Subtract b and an incoming borrow from a.

    Returns:
        (difference word, outgoing borrow)
    """
    diff = a - b - borrow
    if diff < 0:
        return diff + (1 << WORD_BITS), 1
    return diff, 0


# =============================================================================
# Flat vector layout
# =============================================================================


def to_flat(
    integer: Sequence[int], fractional: Sequence[int], fraction_words: int | None = None
) -> list[int]:
    """Build the little-endian flat vector of a magnitude.

    Args:
        integer: Integer words, least-significant first
        fractional: Fractional words, most-significant first
        fraction_words: Width to align the fractional part to; the fractional
            part is zero-extended at its least-significant end. Defaults to
            len(fractional).

    Returns:
        Fractional words (least-significant first) followed by integer words
    """
    if fraction_words is None:
        fraction_words = len(fractional)
    if fraction_words < len(fractional):
        raise ValueError(
            f"Cannot align {len(fractional)} fractional words to {fraction_words}"
        )
    padding = [0] * (fraction_words - len(fractional))
    return padding + list(reversed(fractional)) + list(integer)


def split_flat(flat: Sequence[int], fraction_words: int) -> tuple[list[int], list[int]]:
    """Split a flat vector back into (integer, fractional) word lists.

    The integer list is never empty: a missing integer part becomes [0].
    """
    fractional = list(reversed(flat[:fraction_words]))
    fractional = [0] * (fraction_words - len(fractional)) + fractional
    integer = list(flat[fraction_words:]) or [0]
    return integer, fractional


def trim_integer(words: list[int]) -> list[int]:
    """Strip most-significant zero integer words, keeping at least one word."""
    while len(words) > 1 and words[-1] == 0:
        words.pop()
    if not words:
        words.append(0)
    return words


def trim_fractional(words: list[int]) -> list[int]:
    """Strip least-significant zero fractional words, keeping at least one word.

    An empty fractional part (zero precision) stays empty.
    """
    while len(words) > 1 and words[-1] == 0:
        words.pop()
    return words


# =============================================================================
# Comparison
# =============================================================================


def compare_flat(a: Sequence[int], b: Sequence[int]) -> int:
    """Compare two little-endian vectors, treating missing words as zero.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    for i in range(max(len(a), len(b)) - 1, -1, -1):
        val_a = a[i] if i < len(a) else 0
        val_b = b[i] if i < len(b) else 0
        if val_a != val_b:
            return 1 if val_a > val_b else -1
    return 0


def compare_magnitude(
    a_integer: Sequence[int],
    a_fractional: Sequence[int],
    b_integer: Sequence[int],
    b_fractional: Sequence[int],
) -> int:
    """Compare two magnitudes given as (integer, fractional) word lists.

    Integer words are compared most-significant first, then fractional words
    most-significant first. Out-of-range words count as zero.

    Returns:
        -1 if |a| < |b|, 0 if equal, 1 if |a| > |b|
    """
    result = compare_flat(a_integer, b_integer)
    if result != 0:
        return result
    for i in range(max(len(a_fractional), len(b_fractional))):
        val_a = a_fractional[i] if i < len(a_fractional) else 0
        val_b = b_fractional[i] if i < len(b_fractional) else 0
        if val_a != val_b:
            return 1 if val_a > val_b else -1
    return 0


# =============================================================================
# Addition and subtraction
# =============================================================================


def add_flat(a: Sequence[int], b: Sequence[int], carry: int = 0) -> tuple[list[int], int]:
    """Add two little-endian vectors word by word with carry propagation.

    Returns:
        (sum vector of length max(len(a), len(b)), final carry)
    """
    result = []
    for i in range(max(len(a), len(b))):
        val_a = a[i] if i < len(a) else 0
        val_b = b[i] if i < len(b) else 0
        word, carry = add_word(val_a, val_b, carry)
        result.append(word)
    return result, carry


def subtract_flat(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Subtract b from a word by word with borrow propagation.

    Requires |a| >= |b|; the caller decides the order from a magnitude
    comparison.

    Raises:
        ValueError: If b is larger than a
    """
    result = []
    borrow = 0
    for i in range(max(len(a), len(b))):
        val_a = a[i] if i < len(a) else 0
        val_b = b[i] if i < len(b) else 0
        word, borrow = subtract_word(val_a, val_b, borrow)
        result.append(word)
    if borrow:
        raise ValueError("Subtrahend is larger than minuend")
    return result


# =============================================================================
# Multiplication
# =============================================================================


def multiply_flat(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Multiply two little-endian vectors.

    Every partial product a[i] * b[j] is accumulated into slot i + j without
    carrying; a single sweep afterwards turns the slots back into 32-bit words.

    Returns:
        Product vector of length len(a) + len(b)
    """
    slots = [0] * (len(a) + len(b))
    for i, val_a in enumerate(a):
        if val_a == 0:
            continue
        for j, val_b in enumerate(b):
            slots[i + j] += val_a * val_b

    carry = 0
    for k, slot in enumerate(slots):
        total = slot + carry
        slots[k] = total & WORD_MASK
        carry = total >> WORD_BITS
    # len(a) + len(b) words always hold the full product
    return slots


# =============================================================================
# Shifts
# =============================================================================


def shift_in_bit(words: list[int], bit: int) -> None:
    """Shift a little-endian vector left by one bit in place, feeding `bit` in.

    The vector grows by one word when its top bit is shifted out.
    """
    carry = bit & 1
    for i, word in enumerate(words):
        words[i] = ((word << 1) & WORD_MASK) | carry
        carry = word >> (WORD_BITS - 1)
    if carry:
        words.append(carry)


def set_bit(words: list[int], position: int) -> None:
    """Set bit `position` (0 = least significant) of a little-endian vector."""
    index, offset = divmod(position, WORD_BITS)
    words[index] |= 1 << offset


def get_bit(words: Sequence[int], position: int) -> int:
    """Read bit `position` (0 = least significant) of a little-endian vector."""
    index, offset = divmod(position, WORD_BITS)
    return (words[index] >> offset) & 1


def shift_left_flat(words: Sequence[int], n: int) -> list[int]:
    """Shift a little-endian vector left by n bits.

    The result keeps every bit: it grows by whole words plus one carry word.
    """
    word_shift, bit_shift = divmod(n, WORD_BITS)
    result = [0] * word_shift
    carry = 0
    for word in words:
        if bit_shift:
            result.append(((word << bit_shift) & WORD_MASK) | carry)
            carry = word >> (WORD_BITS - bit_shift)
        else:
            result.append(word)
    if carry:
        result.append(carry)
    return result


def shift_right_flat(words: Sequence[int], n: int) -> list[int]:
    """Shift a little-endian vector right by n bits, keeping its length.

    Bits shifted out below word 0 are dropped.
    """
    word_shift, bit_shift = divmod(n, WORD_BITS)
    source = list(words[word_shift:])
    result = []
    for i, word in enumerate(source):
        value = word >> bit_shift
        if bit_shift and i + 1 < len(source):
            value |= (source[i + 1] << (WORD_BITS - bit_shift)) & WORD_MASK
        result.append(value)
    return result + [0] * (len(words) - len(result))


def high_bits_mask(used_bits: int) -> int:
    """Mask keeping the top `used_bits` bits of a left-justified word."""
    if used_bits <= 0:
        return 0
    return (WORD_MASK << (WORD_BITS - used_bits)) & WORD_MASK
