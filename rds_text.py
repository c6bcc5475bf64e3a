#!/usr/bin/env python3
"""
Text assemblers for PS, PTYN, RadioText and Long PS.

Each assembler holds a fixed-size character grid plus a per-character
"written" mask. Characters are stored as raw 8-bit RDS codes and mapped
to printable text only when rendered.
"""

import logging

from rds_lists import rds_char

logger = logging.getLogger(__name__)

RT_END = 0x0D   # RadioText end-of-message marker


class TextGrid:
    """Fixed-length character grid with a completeness mask."""

    def __init__(self, length):
        self.length = length
        self._codes = [0x20] * length
        self._mask = [False] * length

    def write(self, pos, codes):
        """Store codes starting at pos; positions past the end are dropped."""
        for i, code in enumerate(codes):
            idx = pos + i
            if 0 <= idx < self.length:
                self._codes[idx] = code & 0xFF
                self._mask[idx] = True

    def fill_from(self, pos, code=0x20):
        """Mark pos..end as written with a filler code."""
        for idx in range(max(0, pos), self.length):
            self._codes[idx] = code
            self._mask[idx] = True

    def clear(self):
        self._codes = [0x20] * self.length
        self._mask = [False] * self.length

    @property
    def complete(self):
        return all(self._mask)

    @property
    def mask(self):
        return list(self._mask)

    def render(self, keep_controls=False):
        """Full-width text; unwritten positions render as a space."""
        return ''.join(
            rds_char(code, keep_controls) if seen else ' '
            for code, seen in zip(self._codes, self._mask)
        )


class ProgramServiceName(TextGrid):
    """PS: 8 characters, 2 per 0A/0B group at address*2."""

    def __init__(self):
        super().__init__(8)

    def update(self, segment, block_d):
        self.write(segment * 2, ((block_d >> 8) & 0xFF, block_d & 0xFF))


class ProgramTypeName(TextGrid):
    """PTYN: 8 characters, 4 per 10A group. A/B flip clears the grid."""

    def __init__(self):
        super().__init__(8)
        self.ab_flag = None

    def update(self, flag, segment, block_c, block_d):
        if self.ab_flag is not None and flag != self.ab_flag:
            self.clear()
        self.ab_flag = flag
        self.write((segment & 0x01) * 4, (
            (block_c >> 8) & 0xFF, block_c & 0xFF,
            (block_d >> 8) & 0xFF, block_d & 0xFF,
        ))

    def reset(self):
        self.clear()
        self.ab_flag = None


class RadioText:
    """
    RadioText assembler with two independent 64-char sides.

    The side is selected by the text A/B flag. On a flip only the side
    becoming active is cleared; the other side keeps its last text.

    2A: 4 chars per group at segment*4 (blocks C and D)
    2B: 2 chars per group at segment*2 (block D only)

    A 0x0D code terminates the message: the rest of the side is padded
    with spaces and counted as written.
    """

    LENGTH = 64

    def __init__(self):
        self.sides = (TextGrid(self.LENGTH), TextGrid(self.LENGTH))
        self.ab_flag = False

    def update(self, flag, segment, version, block_c, block_d):
        """
        Apply one 2A/2B group.

        Returns True if the A/B flag flipped with this group.
        """
        flipped = flag != self.ab_flag
        if flipped:
            self.ab_flag = flag
            self.sides[int(flag)].clear()
            logger.debug("RadioText A/B flip -> %s", 'B' if flag else 'A')

        if version == 0:
            pos = segment * 4
            codes = [(block_c >> 8) & 0xFF, block_c & 0xFF,
                     (block_d >> 8) & 0xFF, block_d & 0xFF]
        else:
            pos = segment * 2
            codes = [(block_d >> 8) & 0xFF, block_d & 0xFF]

        side = self.active
        for i, code in enumerate(codes):
            if code == RT_END:
                side.write(pos, codes[:i])
                side.fill_from(pos + i)
                break
        else:
            side.write(pos, codes)
        return flipped

    @property
    def active(self):
        return self.sides[int(self.ab_flag)]

    @property
    def complete(self):
        return self.active.complete

    def render(self, side=None, keep_controls=False):
        """Full 64-char rendering of the active (or requested) side."""
        grid = self.active if side is None else self.sides[int(side)]
        return grid.render(keep_controls)

    def text(self, side=None):
        return self.render(side).rstrip()

    def reset(self):
        for side in self.sides:
            side.clear()
        self.ab_flag = False


class LongPS:
    """Long PS (15A): 32 bytes of UTF-8, 4 per group, no completeness tracking."""

    LENGTH = 32

    def __init__(self):
        self._buf = bytearray(self.LENGTH)

    def update(self, segment, block_c, block_d):
        pos = (segment & 0x07) * 4
        self._buf[pos:pos + 4] = bytes((
            (block_c >> 8) & 0xFF, block_c & 0xFF,
            (block_d >> 8) & 0xFF, block_d & 0xFF,
        ))

    def render(self):
        text = bytes(self._buf).split(b'\r', 1)[0]
        return text.decode('utf-8', errors='replace').rstrip('\x00 ')

    def reset(self):
        self._buf = bytearray(self.LENGTH)
