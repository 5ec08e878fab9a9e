"""Constants shared by the fixed-point engine and its consumers."""

# Storage unit: every word is a 32-bit unsigned integer
WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1

# Fractional precision used when a caller does not ask for one
DEFAULT_FRACTIONAL_BITS = 32

# Rendering budget: one decimal digit per 4 fractional bits
BITS_PER_DECIMAL_DIGIT = 4

# Working precision of the BBP series consumer
PI_PRECISION_BITS = 256
PI_DEFAULT_DIGITS = 86

# First 100 decimals of pi, used to check the series consumer
PI_REFERENCE = (
    "3.1415926535897932384626433832795028841971693993751"
    "058209749445923078164062862089986280348253421170679"
)
