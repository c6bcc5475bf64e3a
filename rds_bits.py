#!/usr/bin/env python3
"""
Bitfield helpers for RDS group words.

All functions are pure and operate on 16-bit block values.
Block B layout shared by every group type:

    15..12  group type (0-15)
    11      version (0 = A, 1 = B)
    10      TP
    9..5    PTY
    4..0    group-specific (flags, address)
"""


def getbit(val, b):
    return (val >> b) & 0x01


def getbits(val, b, n):
    """Return n bits of val starting at bit b (LSB = bit 0)."""
    return (val >> b) & ((1 << n) - 1)


def group_code(block_b):
    """5-bit group code: type number in the upper 4 bits, version in bit 0."""
    return (block_b >> 11) & 0x1F


def split_group_code(code):
    """Return (type_number, version) where version 0 = A, 1 = B."""
    return code >> 1, code & 0x01


def group_label(code):
    type_num, version = split_group_code(code)
    return f"{type_num}{'B' if version else 'A'}"


def group_sort_key(label):
    """Sort '2A' < '2B' < '10A' by numeric type, then version letter."""
    return int(label[:-1]), label[-1]


def tp_flag(block_b):
    return bool(getbit(block_b, 10))


def pty_code(block_b):
    return getbits(block_b, 5, 5)


def ab_flag(block_b):
    """Text A/B flag (2A/2B, 10A) or TA (0A/0B) - bit 4 of block B."""
    return bool(getbit(block_b, 4))


def ms_flag(block_b):
    return bool(getbit(block_b, 3))


def di_bit(block_b):
    return bool(getbit(block_b, 2))


# Address field width in block B per group code
_ADDRESS_BITS = {
    0: 2, 1: 2,     # 0A/0B: PS segment
    4: 4, 5: 4,     # 2A/2B: RadioText segment
    20: 1,          # 10A: PTYN segment
    28: 4,          # 14A: EON variant
    30: 3,          # 15A: Long PS segment
}


def address(block_b, code):
    """Segment address carried in block B for text/EON groups, or None."""
    width = _ADDRESS_BITS.get(code)
    if width is None:
        return None
    return getbits(block_b, 0, width)


def hex4(word):
    return f'{word & 0xFFFF:04X}'


def hex2(byte):
    return f'{byte & 0xFF:02X}'


def af_code_to_mhz(code):
    """Decode an FM AF code (1-204) to MHz, or None for non-frequency codes."""
    if 1 <= code <= 204:
        return round(87.5 + code * 0.1, 1)
    return None


def af_header_count(code):
    """Return list length for an AF header code (225-249), else None."""
    if 225 <= code <= 249:
        return code - 224
    return None


def decode_pin(word):
    """
    Decode a Programme Item Number word.

    Format: day (5 bits), hour (5 bits), minute (6 bits).
    Returns 'D. HH:MM' or None when the day field is zero (no PIN).
    """
    day = getbits(word, 11, 5)
    if day == 0:
        return None
    hour = getbits(word, 6, 5)
    minute = getbits(word, 0, 6)
    return f"{day}. {hour:02d}:{minute:02d}"
