#!/usr/bin/env python3
"""Tests for the PS, PTYN, RadioText and Long PS assemblers."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

from rds_text import LongPS, ProgramServiceName, ProgramTypeName, RadioText, TextGrid


def _word(chars):
    return (ord(chars[0]) << 8) | ord(chars[1])


def _write_rt_2a(rt, text, flag=False, segments=range(16)):
    text = text.ljust(64)
    for seg in segments:
        chunk = text[seg * 4:seg * 4 + 4]
        rt.update(flag, seg, 0, _word(chunk[:2]), _word(chunk[2:]))


def test_text_grid_mask():
    grid = TextGrid(4)
    assert not any(grid.mask)
    grid.write(2, (0x41, 0x42, 0x43))
    assert grid.mask == [False, False, True, True]
    assert grid.render() == '  AB'
    assert not grid.complete
    grid.fill_from(0)
    assert grid.complete
    grid.clear()
    assert not any(grid.mask)


def test_ps_segments_out_of_order():
    ps = ProgramServiceName()
    ps.update(3, _word('GH'))
    ps.update(1, _word('CD'))
    assert ps.render() == '  CD  GH'
    ps.update(0, _word('AB'))
    ps.update(2, _word('EF'))
    assert ps.complete
    assert ps.render() == 'ABCDEFGH'


def test_ps_rds_charset():
    ps = ProgramServiceName()
    ps.update(0, (0x91 << 8) | 0x20)
    assert ps.render()[0] == 'ä'


def test_ptyn_flip_clears():
    ptyn = ProgramTypeName()
    ptyn.update(False, 0, _word('RO'), _word('CK'))
    ptyn.update(False, 1, _word(' H'), _word('IT'))
    assert ptyn.render() == 'ROCK HIT'
    assert ptyn.complete

    ptyn.update(True, 0, _word('JA'), _word('ZZ'))
    assert ptyn.render() == 'JAZZ    '
    assert not ptyn.complete


def test_radiotext_2a_complete():
    rt = RadioText()
    _write_rt_2a(rt, 'HELLO WORLD', segments=range(15))
    assert not rt.complete
    _write_rt_2a(rt, 'HELLO WORLD', segments=[15])
    assert rt.complete
    assert rt.text() == 'HELLO WORLD'
    assert len(rt.render()) == 64


def test_radiotext_2b_two_chars_per_group():
    rt = RadioText()
    rt.update(False, 0, 1, 0x0000, _word('HI'))
    rt.update(False, 1, 1, 0x0000, _word(' !'))
    assert rt.text() == 'HI !'
    assert rt.active.mask[:4] == [True] * 4
    assert not rt.active.mask[4]


def test_radiotext_carriage_return_completes_side():
    rt = RadioText()
    _write_rt_2a(rt, 'SHORT MS', segments=[0, 1])
    rt.update(False, 2, 0, (ord('G') << 8) | 0x0D, _word('XY'))
    assert rt.complete
    assert rt.render() == 'SHORT MSG'.ljust(64)


def test_radiotext_flip_clears_only_new_side():
    rt = RadioText()
    _write_rt_2a(rt, 'FIRST MESSAGE')
    flipped = rt.update(True, 0, 0, _word('SE'), _word('CO'))
    assert flipped
    assert rt.ab_flag is True
    assert rt.text() == 'SECO'
    assert rt.text(False) == 'FIRST MESSAGE'

    # Flipping back clears side A
    assert rt.update(False, 0, 0, _word('TH'), _word('RD'))
    assert rt.text() == 'THRD'
    assert rt.text(True) == 'SECO'

    assert not rt.update(False, 1, 0, _word('  '), _word('  '))


def test_radiotext_reset():
    rt = RadioText()
    _write_rt_2a(rt, 'A', flag=True)
    rt.reset()
    assert rt.ab_flag is False
    assert rt.text(True) == ''


def test_long_ps_utf8():
    lps = LongPS()
    payload = 'Rádio Ü'.encode('utf-8')
    payload += b'\x00' * (-len(payload) % 4)
    for seg in range(len(payload) // 4):
        chunk = payload[seg * 4:seg * 4 + 4]
        lps.update(seg, (chunk[0] << 8) | chunk[1], (chunk[2] << 8) | chunk[3])
    assert lps.render() == 'Rádio Ü'


def test_long_ps_terminator():
    lps = LongPS()
    lps.update(0, _word('AB'), (ord('C') << 8) | 0x0D)
    lps.update(1, _word('XX'), _word('XX'))
    assert lps.render() == 'ABC'
    lps.reset()
    assert lps.render() == ''


def test_control_codes_kept_on_request():
    rt = RadioText()
    rt.update(False, 0, 0, 0x410A, 0x4243)
    assert rt.text() == 'A?BC'
    assert rt.render(keep_controls=True)[:4] == 'A\nBC'
