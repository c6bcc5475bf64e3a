#!/usr/bin/env python3
"""Tests for Enhanced Other Networks tracking (groups 14A/14B)."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

from rds_eon import EONTracker

OTHER_PI = 0xD301


def _block_b(variant, tp=0, version=0):
    return (14 << 12) | (version << 11) | (tp << 4) | variant


def _code(mhz):
    return int(round((mhz - 87.5) * 10))


def test_ps_assembly():
    eon = EONTracker()
    for variant, chars in enumerate(('NE', 'WS', ' 2', '4 ')):
        eon.update_a(_block_b(variant), (ord(chars[0]) << 8) | ord(chars[1]), OTHER_PI, variant)
    network = eon.snapshot()['D301']
    assert network['ps'] == 'NEWS 24 '
    assert network['ps_complete']
    assert network['last_update'] == 3


def test_af_sorted_unique():
    eon = EONTracker()
    eon.update_a(_block_b(4), (_code(101.2) << 8) | _code(94.3), OTHER_PI, 0)
    eon.update_a(_block_b(4), (_code(94.3) << 8) | 205, OTHER_PI, 0)
    assert eon.networks['D301'].af == [94.3, 101.2]


def test_mapped_frequencies_capped():
    eon = EONTracker(mapped_max=2)
    eon.update_a(_block_b(5), (_code(98.5) << 8) | _code(101.2), OTHER_PI, 0)
    eon.update_a(_block_b(6), (_code(98.5) << 8) | _code(101.2), OTHER_PI, 0)
    assert eon.networks['D301'].mapped == ['98.5 -> 101.2']

    eon.update_a(_block_b(7), (_code(99.0) << 8) | _code(102.0), OTHER_PI, 0)
    eon.update_a(_block_b(9), (_code(100.0) << 8) | _code(103.0), OTHER_PI, 0)
    assert eon.networks['D301'].mapped == ['99.0 -> 102.0', '100.0 -> 103.0']


def test_linkage_pty_ta_pin():
    eon = EONTracker()
    eon.update_a(_block_b(12, tp=1), 0xABCD, OTHER_PI, 0)
    eon.update_a(_block_b(13), (5 << 11) | 0x0001, OTHER_PI, 0)
    eon.update_a(_block_b(14), (2 << 11) | (6 << 6) | 30, OTHER_PI, 0)
    network = eon.snapshot()['D301']
    assert network['linkage'] == 'ABCD'
    assert network['pty'] == 5
    assert network['ta'] is True
    assert network['pin'] == '2. 06:30'
    # TP comes from every 14A group
    assert network['tp'] is False


def test_group_14b_flags():
    eon = EONTracker()
    eon.update_b(_block_b(0, version=1) | 0x18, OTHER_PI, 42)
    network = eon.networks['D301']
    assert network.tp and network.ta
    assert network.last_update == 42


def test_networks_keyed_by_pi():
    eon = EONTracker()
    eon.update_a(_block_b(0), 0x4142, 0x1111, 0)
    eon.update_a(_block_b(0), 0x4344, 0x2222, 0)
    assert set(eon.snapshot()) == {'1111', '2222'}
    eon.reset()
    assert eon.snapshot() == {}
