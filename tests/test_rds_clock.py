#!/usr/bin/env python3
"""Tests for group 4A clock time decoding."""

from datetime import date, datetime
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

from rds_clock import decode_clock, format_clock, format_offset, local_time, mjd_to_date


def mjd_from_date(year, month, day):
    """Compute Modified Julian Day (MJD) for a date at 00:00 UTC."""
    return (date(year, month, day) - date(1858, 11, 17)).days


def _blocks(mjd, hour, minute, offset_half_hours):
    offset = abs(offset_half_hours) | (0x20 if offset_half_hours < 0 else 0)
    block_b = (4 << 12) | ((mjd >> 15) & 0x03)
    block_c = ((mjd & 0x7FFF) << 1) | ((hour >> 4) & 0x01)
    block_d = ((hour & 0x0F) << 12) | ((minute & 0x3F) << 6) | offset
    return block_b, block_c, block_d


def test_mjd_reference_date():
    assert mjd_to_date(58849) == (2020, 1, 1)


@pytest.mark.parametrize('ymd', [
    (1999, 12, 31),
    (2000, 1, 1),
    (2000, 2, 29),
    (2021, 1, 1),
    (2024, 2, 29),
    (2024, 3, 1),
])
def test_mjd_matches_calendar(ymd):
    assert mjd_to_date(mjd_from_date(*ymd)) == ymd


def test_decode_clock_fields():
    ct = decode_clock(*_blocks(mjd_from_date(2024, 2, 29), 17, 5, 4))
    assert ct['mjd'] == mjd_from_date(2024, 2, 29)
    assert ct['utc'] == datetime(2024, 2, 29, 17, 5)
    assert ct['hour'] == 17
    assert ct['minute'] == 5
    assert ct['offset'] == 4
    assert format_clock(local_time(ct['utc'], ct['offset'])) == '2024-02-29 19:05'


def test_negative_offset_crosses_midnight():
    ct = decode_clock(*_blocks(mjd_from_date(2020, 1, 1), 1, 30, -5))
    assert ct['offset'] == -5
    assert format_clock(local_time(ct['utc'], ct['offset'])) == '2019-12-31 23:00'


def test_out_of_range_time_rejected():
    assert decode_clock(*_blocks(58849, 24, 0, 0)) is None
    assert decode_clock(*_blocks(58849, 12, 60, 0)) is None


def test_mjd_zero_has_no_date():
    ct = decode_clock(*_blocks(0, 12, 0, 0))
    assert ct is not None
    assert ct['utc'] is None


def test_format_offset():
    assert format_offset(0) == '+00:00'
    assert format_offset(3) == '+01:30'
    assert format_offset(-10) == '-05:00'
