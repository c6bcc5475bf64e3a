#!/usr/bin/env python3
"""
Group 4A: Clock Time and Date (CT).

Format:
- MJD (Modified Julian Day): 17 bits spanning block_b[1:0] and block_c[15:1]
- Hour: 5 bits spanning block_c[0] and block_d[15:12]
- Minute: 6 bits in block_d[11:6]
- Local offset: block_d[5] sign, block_d[4:0] half-hours from UTC
"""

from datetime import datetime, timedelta


def mjd_to_date(mjd):
    """
    Convert Modified Julian Day to (year, month, day).

    IEC 62106 Annex G. Intermediate terms are truncated toward zero,
    valid for 1900-03-01 to 2100-02-28.
    """
    yp = int((mjd - 15078.2) / 365.25)
    mp = int((mjd - 14956.1 - int(yp * 365.25)) / 30.6001)
    day = mjd - 14956 - int(yp * 365.25) - int(mp * 30.6001)
    k = 1 if mp in (14, 15) else 0
    year = 1900 + yp + k
    month = mp - 1 - k * 12
    return year, month, day


def decode_clock(block_b, block_c, block_d):
    """
    Decode a 4A group.

    Returns:
        dict with 'utc' (datetime or None when MJD is zero), 'hour',
        'minute' and 'offset' (signed half-hours), or None when the
        time fields are out of range.
    """
    mjd = ((block_b & 0x03) << 15) | ((block_c >> 1) & 0x7FFF)
    hour = ((block_c & 0x01) << 4) | ((block_d >> 12) & 0x0F)
    minute = (block_d >> 6) & 0x3F
    offset = block_d & 0x1F
    if block_d & 0x20:
        offset = -offset

    if hour > 23 or minute > 59:
        return None

    utc = None
    if mjd != 0:
        year, month, day = mjd_to_date(mjd)
        try:
            utc = datetime(year, month, day, hour, minute)
        except ValueError:
            return None

    return {'mjd': mjd, 'utc': utc, 'hour': hour, 'minute': minute, 'offset': offset}


def local_time(utc, offset):
    """Apply a signed half-hour offset to a UTC datetime."""
    return utc + timedelta(minutes=30 * offset)


def format_offset(offset):
    sign = '-' if offset < 0 else '+'
    minutes = abs(offset) * 30
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_clock(value):
    return value.strftime('%Y-%m-%d %H:%M')
