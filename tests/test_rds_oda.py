#!/usr/bin/env python3
"""Tests for the ODA registry and RadioText+ extraction."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

from rds_oda import ODARegistry, RTPlusTags, parse_rtplus

RADIOTEXT = 'NOW PLAYING: ARTIST - TITLE'.ljust(64)


def _rtplus_blocks(ct1, start1, len1, ct2=0, start2=0, len2=0, toggle=0, running=1):
    block_b = (11 << 12) | (toggle << 4) | (running << 3) | (ct1 >> 3)
    block_c = ((ct1 & 0x07) << 13) | (start1 << 7) | (len1 << 1) | (ct2 >> 5)
    block_d = ((ct2 & 0x1F) << 11) | (start2 << 5) | len2
    return block_b, block_c, block_d


def test_registry_newest_first():
    oda = ODARegistry()
    oda.register(0x4BD7, 22, 100)
    oda.register(0xCD46, 16, 200)
    snapshot = oda.snapshot()
    assert [e['aid'] for e in snapshot] == ['CD46', '4BD7']
    assert snapshot[1] == {'aid': '4BD7', 'name': 'RadioText+ (RT+)', 'group': '11A'}
    assert snapshot[0]['name'] == 'TMC (ALERT-C)'
    assert oda.rtplus_group == 22


def test_registry_capacity_evicts_oldest():
    oda = ODARegistry(capacity=5)
    for i, aid in enumerate(range(0x1001, 0x1007)):
        oda.register(aid, 12, i)
    assert [e['aid'] for e in oda.snapshot()] == ['1006', '1005', '1004', '1003', '1002']
    assert oda.entries[0]['name'] == 'Unknown ODA'


def test_registry_upsert_keeps_position():
    oda = ODARegistry()
    oda.register(0x1001, 12, 0)
    oda.register(0x1002, 12, 1)
    entry = oda.register(0x1001, 24, 2)
    assert [e['aid'] for e in oda.snapshot()] == ['1002', '1001']
    assert entry['group'] == '12A'
    assert entry['last_seen'] == 2


def test_registry_group_not_carried():
    oda = ODARegistry()
    oda.register(0x4BD7, 0, 0)
    assert oda.snapshot()[0]['group'] is None
    assert oda.rtplus_group is None
    oda.register(0x4BD8, 0x1F, 0)
    assert oda.rtplus_group is None


def test_parse_rtplus_fields():
    toggle, running, tags = parse_rtplus(*_rtplus_blocks(4, 13, 5, 33, 22, 4, toggle=1, running=0))
    assert toggle is True
    assert running is False
    assert tags == [(4, 13, 5), (33, 22, 4)]


def test_rtplus_extracts_artist_and_title():
    tags = RTPlusTags()
    tags.update(*_rtplus_blocks(4, 13, 5, 1, 22, 4), RADIOTEXT, False, 1000)
    snapshot = tags.snapshot()
    assert snapshot['item_running'] is True
    assert snapshot['item_toggle'] is False
    by_name = {t['name']: t for t in snapshot['tags']}
    assert by_name['ITEM.ARTIST']['text'] == 'ARTIST'
    assert by_name['ITEM.TITLE']['text'] == 'TITLE'
    assert by_name['ITEM.ARTIST']['timestamp'] == 1000
    assert not by_name['ITEM.TITLE']['stale']


def test_rtplus_rejects_invalid_tags():
    tags = RTPlusTags()
    assert tags.apply(0, 13, 5, RADIOTEXT, False, 0) is None
    assert tags.apply(4, 60, 9, RADIOTEXT, False, 0) is None
    assert tags.apply(4, 50, 5, RADIOTEXT, False, 0) is None     # only spaces
    assert tags.tags == {}
    assert tags.apply(4, 60, 8, 'x' * 60 + 'ABCD', False, 0) == 'ABCD'


def test_rtplus_capacity_evicts_least_recent():
    text = 'ONE TWO THREE FOUR FIVE SIX SEVEN'.ljust(64)
    tags = RTPlusTags(capacity=6)
    for ct in range(1, 7):
        tags.apply(ct, 0, 2, text, False, ct)
    # Refresh type 1 so type 2 becomes least recent
    tags.apply(1, 4, 2, text, False, 7)
    tags.apply(7, 8, 4, text, False, 8)
    assert set(tags.tags) == {1, 3, 4, 5, 6, 7}
    assert tags.tags[1]['text'] == 'TWO'
    assert tags.tags[7]['text'] == 'THREE'


def test_rtplus_stale_on_side_change():
    tags = RTPlusTags()
    tags.apply(4, 13, 5, RADIOTEXT, False, 0)
    tags.mark_stale(False)
    assert not tags.tags[4]['stale']
    tags.mark_stale(True)
    assert tags.tags[4]['stale']
    # A fresh extraction clears the stale mark
    tags.apply(4, 13, 5, RADIOTEXT, True, 1)
    assert not tags.tags[4]['stale']


def test_rtplus_strips_unprintable():
    tags = RTPlusTags()
    text = 'AB\x01CD'.ljust(64)
    assert tags.apply(1, 0, 4, text, False, 0) == 'ABCD'
