#!/usr/bin/env python3
"""
RDS (Radio Data System) group decoder.

Consumes raw RDS/RBDS groups (four 16-bit blocks, already error-checked
by the tuner) and maintains the decoded station state:

- PI tracking with debounce; a confirmed PI change resets station state
- PS, RadioText (A/B), PTYN and Long PS assembly
- AF lists with Method A/B classification
- ODA registry and RadioText+ tags
- Clock time and date
- Enhanced Other Networks
- Group statistics, BER window and text stability

Record format (one group per line):

    [tag] 3F7C 0615 8B2C 41A0   (anything before the last 16 digits is ignored)
    3F7C06158B2C41A0
    3F7C----8B2C41A0        (block with uncorrectable errors)

Group type decoding:
- 0A/0B: PS name, TA/MS/DI flags, AF (0A)
- 1A/1B: ECC/LIC and PIN
- 2A/2B: RadioText
- 3A: ODA application ids
- 4A: clock time and date
- 8A: TMC presence
- 10A: PTYN
- 14A/14B: EON
- 15A: Long PS, 15B: fast basic tuning
"""

import logging
import re
import time

from rds_af import AlternateFrequencies
from rds_bits import (
    ab_flag, address, decode_pin, di_bit, group_code, group_label, hex2, hex4,
    ms_flag, pty_code, split_group_code, tp_flag,
)
from rds_clock import decode_clock, format_clock, format_offset, local_time
from rds_config import DecoderConfig
from rds_eon import EONTracker
from rds_lists import PTY_NAMES_RBDS, PTY_NAMES_RDS, RTPLUS_AIDS, TMC_AIDS
from rds_oda import ODARegistry, RTPlusTags
from rds_stats import BERWindow, GroupStats, StabilityTracker
from rds_text import LongPS, ProgramServiceName, ProgramTypeName, RadioText

logger = logging.getLogger(__name__)

RECORD_HEX_CHARS = 16
BIT_ERROR_MARK = '-'

_RE_SEPARATORS = re.compile(r'[\s,:;]+')
_RE_RECORD = re.compile(r'[0-9A-Fa-f-]{16}')


def pi_to_callsign(pi_hex):
    """
    Decode RBDS PI code to North American call letters.

    PI codes encode US station call signs:
    - 0x1000-0x54A7: K stations (KAAA-KZZZ)
    - 0x54A8-0x994F: W stations (WAAA-WZZZ)

    Returns call letters or None if not decodable.
    """
    if not pi_hex:
        return None

    try:
        pi = int(pi_hex, 16)
    except (ValueError, TypeError):
        return None

    if 0x1000 <= pi <= 0x54A7:
        prefix, offset = 'K', pi - 0x1000
    elif 0x54A8 <= pi <= 0x994F:
        prefix, offset = 'W', pi - 0x54A8
    else:
        return None

    l4 = offset % 26
    offset //= 26
    l3 = offset % 26
    l2 = offset // 26
    return prefix + chr(ord('A') + l2) + chr(ord('A') + l3) + chr(ord('A') + l4)


def parse_record(line):
    """
    Parse one textual group record.

    Returns:
        None if the line is too short or malformed (ignored entirely),
        ('error', None) if the record is marked as a bit error,
        ('group', (a, b, c, d)) otherwise.
    """
    # The record is the last 16 payload characters; any tag before it is dropped
    payload = _RE_SEPARATORS.sub('', line)
    if len(payload) < RECORD_HEX_CHARS:
        return None
    payload = payload[-RECORD_HEX_CHARS:]

    if not _RE_RECORD.fullmatch(payload):
        return None
    if BIT_ERROR_MARK in payload:
        return ('error', None)
    return ('group', tuple(int(payload[i:i + 4], 16) for i in range(0, RECORD_HEX_CHARS, 4)))


def _monotonic_ms():
    return time.monotonic() * 1000.0


class RDSDecoder:
    """
    Stateful RDS group decoder.

    Feed records with parse_message()/parse_line() or already-split
    blocks with decode_group(); read the decoded state through the
    accessors or snapshot(). Not thread-safe: one caller at a time
    (see rds_worker.RDSWorker).
    """

    def __init__(self, config=None, clock=None):
        """
        Initialize RDS decoder.

        Args:
            config: DecoderConfig (default: built-in defaults)
            clock: callable returning monotonic time in milliseconds
        """
        self.config = config or DecoderConfig()
        self._clock = clock or _monotonic_ms

        self.ber_window = BERWindow(self.config.ber_window, self.config.grace_ms)
        self.group_stats = GroupStats()

        self.ps = ProgramServiceName()
        self.radiotext = RadioText()
        self.ptyn = ProgramTypeName()
        self.long_ps = LongPS()
        self.af = AlternateFrequencies()
        self.oda = ODARegistry(self.config.oda_history)
        self.rtplus = RTPlusTags(self.config.rtplus_max_tags)
        self.eon = EONTracker(self.config.eon_mapped_max)

        self._ps_tracker = StabilityTracker(self.config.stable_ms)
        self._ptyn_tracker = StabilityTracker(self.config.stable_ms)
        self._rt_tracker = StabilityTracker(self.config.stable_ms)

        self.pi = None
        self.pi_candidate = None
        self.pi_counter = 0
        self.pi_established_ms = None
        self.last_update_ms = None
        self._reset_station()

    def reset(self):
        """Reset all decoder state, including PI and link statistics."""
        self.pi = None
        self.pi_candidate = None
        self.pi_counter = 0
        self.pi_established_ms = None
        self.last_update_ms = None
        self.ber_window.clear()
        self._reset_station()

    def _reset_station(self):
        """Clear everything derived from the current station's groups."""
        self.ps.clear()
        self.radiotext.reset()
        self.ptyn.reset()
        self.long_ps.reset()
        self.af.reset()
        self.oda.reset()
        self.rtplus.reset()
        self.eon.reset()
        self.group_stats.reset()
        self._ps_tracker.reset()
        self._ptyn_tracker.reset()
        self._rt_tracker.reset()

        self.pty = 0
        self.tp = False
        self.ta = False
        self.ms = False
        self.di_stereo = False
        self.di_artificial_head = False
        self.di_compressed = False
        self.di_dynamic_pty = False
        self.ecc = None
        self.lic = None
        self.pin = None
        self._ct = None
        self.has_rt_plus = False
        self.has_eon = False
        self.has_tmc = False
        self.has_oda = False

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def parse_message(self, data):
        """Process newline-delimited records in stream order. Returns groups decoded."""
        decoded = 0
        for line in data.splitlines():
            if self.parse_line(line):
                decoded += 1
        return decoded

    def parse_line(self, line):
        """
        Process one record.

        Bit-error records add an error sample to the BER window; clean
        records add a good sample and are decoded. Short or malformed
        lines are ignored. Returns True if a group was decoded.
        """
        record = parse_record(line)
        if record is None:
            return False
        kind, blocks = record
        if kind == 'error':
            self.ber_window.add(True)
            return False
        self.ber_window.add(False)
        self.decode_group(*blocks)
        return True

    def decode_group(self, block_a, block_b, block_c, block_d):
        """Advance the decoder state by one group."""
        block_a &= 0xFFFF
        block_b &= 0xFFFF
        block_c &= 0xFFFF
        block_d &= 0xFFFF

        now = self._clock()
        self.last_update_ms = now
        self._track_pi(block_a, now)

        code = group_code(block_b)
        type_num, version = split_group_code(code)
        self.group_stats.add(group_label(code))

        self.tp = tp_flag(block_b)
        self.pty = pty_code(block_b)

        if self.oda.rtplus_group is not None and code == self.oda.rtplus_group:
            self.rtplus.update(block_b, block_c, block_d,
                               self.radiotext.render(keep_controls=True),
                               self.radiotext.ab_flag, now)
            return

        if type_num == 0:
            self._decode_group_0(code, block_b, block_c, block_d, version, now)
        elif type_num == 1:
            self._decode_group_1(block_c, block_d)
        elif type_num == 2:
            self._decode_group_2(code, block_b, block_c, block_d, version, now)
        elif code == 6:
            self._decode_group_3a(block_b, block_d, now)
        elif code == 8:
            self._decode_group_4a(block_b, block_c, block_d)
        elif code == 16:
            self.has_tmc = True
        elif code == 20:
            self._decode_group_10a(code, block_b, block_c, block_d, now)
        elif type_num == 14:
            self._decode_group_14(version, block_b, block_c, block_d, now)
        elif code == 30:
            self.long_ps.update(address(block_b, code), block_c, block_d)
        elif code == 31:
            self.ta = ab_flag(block_b)

    def _track_pi(self, block_a, now):
        pi = hex4(block_a)
        if pi == self.pi_candidate:
            self.pi_counter += 1
        else:
            self.pi_candidate = pi
            self.pi_counter = 1

        confirmed = (self.pi_counter >= self.config.pi_confirm_count or
                     (self.pi is None and self.pi_counter >= 1))
        if confirmed and pi != self.pi:
            logger.debug("PI confirmed: %s -> %s", self.pi, pi)
            self._reset_station()
            self.pi = pi
            self.pi_established_ms = now

    # ------------------------------------------------------------------
    # Group handlers
    # ------------------------------------------------------------------

    def _decode_group_0(self, code, block_b, block_c, block_d, version, now):
        """Group 0A/0B: PS name, TA/MS, decoder identification, AF (0A)."""
        self.ta = ab_flag(block_b)
        self.ms = ms_flag(block_b)
        segment = address(block_b, code)

        di = di_bit(block_b)
        if segment == 0:
            self.di_dynamic_pty = di
        elif segment == 1:
            self.di_compressed = di
        elif segment == 2:
            self.di_artificial_head = di
        else:
            self.di_stereo = di

        self.ps.update(segment, block_d)
        if self.ps.complete:
            self._ps_tracker.observe(self.ps.render(), now)

        if version == 0:
            self.af.update(block_c)

    def _decode_group_1(self, block_c, block_d):
        """Group 1A/1B: slow labelling codes (ECC, LIC) and PIN."""
        variant = (block_c >> 12) & 0x07
        if variant == 0:
            self.ecc = hex2(block_c)
        elif variant == 3:
            self.lic = hex2(block_c)

        pin = decode_pin(block_d)
        if pin is not None:
            self.pin = pin

    def _decode_group_2(self, code, block_b, block_c, block_d, version, now):
        """Group 2A/2B: RadioText."""
        flag = ab_flag(block_b)
        flipped = self.radiotext.update(flag, address(block_b, code), version, block_c, block_d)
        if flipped:
            self.rtplus.mark_stale(flag)
        if self.radiotext.complete:
            self._rt_tracker.observe(self.radiotext.render(), now)

    def _decode_group_3a(self, block_b, block_d, now):
        """Group 3A: ODA application id and the group carrying it."""
        self.has_oda = True
        self.oda.register(block_d, block_b & 0x1F, now)
        if block_d in RTPLUS_AIDS:
            self.has_rt_plus = True
        elif block_d in TMC_AIDS:
            self.has_tmc = True

    def _decode_group_4a(self, block_b, block_c, block_d):
        """Group 4A: clock time and date."""
        ct = decode_clock(block_b, block_c, block_d)
        if ct is not None and ct['utc'] is not None:
            self._ct = ct

    def _decode_group_10a(self, code, block_b, block_c, block_d, now):
        """Group 10A: programme type name."""
        self.ptyn.update(ab_flag(block_b), address(block_b, code), block_c, block_d)
        if self.ptyn.complete:
            self._ptyn_tracker.observe(self.ptyn.render(), now)

    def _decode_group_14(self, version, block_b, block_c, block_d, now):
        """Group 14A/14B: enhanced other networks."""
        self.has_eon = True
        if version == 0:
            self.eon.update_a(block_b, block_c, block_d, now)
        else:
            self.eon.update_b(block_b, block_d, now)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def pty_name(self):
        names = PTY_NAMES_RBDS if self.config.rbds else PTY_NAMES_RDS
        return names.get(self.pty, f"Unknown ({self.pty})")

    @property
    def callsign(self):
        if not self.config.rbds:
            return None
        return pi_to_callsign(self.pi)

    def get_ps(self):
        """PS as 8 characters; unwritten positions are spaces."""
        return self.ps.render()

    def get_ps_stable(self):
        """PS once it has been complete and unchanged for stable_ms."""
        return self._ps_tracker.stable_value(self._clock())

    def get_ptyn(self):
        return self.ptyn.render().rstrip()

    def get_long_ps(self):
        return self.long_ps.render()

    def get_rt(self):
        return self.radiotext.text()

    def get_rt_a(self):
        return self.radiotext.text(False)

    def get_rt_b(self):
        return self.radiotext.text(True)

    def get_rt_stable(self):
        """RadioText once a complete side has been unchanged for stable_ms."""
        value = self._rt_tracker.stable_value(self._clock())
        return value.rstrip() if value is not None else None

    def get_af_list(self):
        return self.af.af_list()

    def get_utc_time(self):
        if self._ct is None:
            return None
        return format_clock(self._ct['utc'])

    def get_local_time(self):
        if self._ct is None:
            return None
        return format_clock(local_time(self._ct['utc'], self._ct['offset']))

    def get_group_stats(self):
        return self.group_stats.rows()

    def get_ber(self):
        """Percentage of error records in the window, or -1 if unknown."""
        return self.ber_window.ber(self.pi_established_ms, self._clock())

    def in_grace_period(self, now=None):
        if self.pi_established_ms is None:
            return True
        now = self._clock() if now is None else now
        return now - self.pi_established_ms < self.config.grace_ms

    def get_stable_flags(self):
        """
        Reliability of each displayed field.

        Instantaneous flags are reported unstable during the grace period
        after a PI change, whatever their current value.
        """
        now = self._clock()
        settled = not self.in_grace_period(now)
        return {
            'tp': settled,
            'ta': settled,
            'ms': settled,
            'di_stereo': settled,
            'di_artificial_head': settled,
            'di_compressed': settled,
            'di_dynamic_pty': settled,
            'ps': self._ps_tracker.is_stable(now),
            'ptyn': self._ptyn_tracker.is_stable(now),
            'rt': self._rt_tracker.is_stable(now),
        }

    @property
    def station_name(self):
        """Decoded station name (PS), only when all segments were received."""
        if self.ps.complete:
            return self.ps.render().strip() or None
        return None

    @property
    def radio_text(self):
        """Decoded RadioText if available."""
        return self.get_rt() or None

    @property
    def clock_time(self):
        """Local clock time with its UTC offset, or None if not received."""
        if self._ct is None:
            return None
        return f"{self.get_local_time()} UTC{format_offset(self._ct['offset'])}"

    def snapshot(self):
        """Full decoded state as plain data (safe to hand to another thread)."""
        return {
            'pi': self.pi,
            'callsign': self.callsign,
            'pty': self.pty,
            'pty_name': self.pty_name,
            'ps': self.get_ps(),
            'ps_stable': self.get_ps_stable(),
            'long_ps': self.get_long_ps(),
            'ptyn': self.get_ptyn(),
            'rt': self.get_rt(),
            'rt_a': self.get_rt_a(),
            'rt_b': self.get_rt_b(),
            'rt_ab_flag': 'B' if self.radiotext.ab_flag else 'A',
            'rt_stable': self.get_rt_stable(),
            'af_list': self.get_af_list(),
            'af_type': self.af.af_type,
            'ecc': self.ecc,
            'lic': self.lic,
            'pin': self.pin,
            'local_time': self.get_local_time(),
            'utc_time': self.get_utc_time(),
            'tp': self.tp,
            'ta': self.ta,
            'ms': self.ms,
            'di_stereo': self.di_stereo,
            'di_artificial_head': self.di_artificial_head,
            'di_compressed': self.di_compressed,
            'di_dynamic_pty': self.di_dynamic_pty,
            'has_rt_plus': self.has_rt_plus,
            'has_eon': self.has_eon,
            'has_tmc': self.has_tmc,
            'has_oda': self.has_oda,
            'eon_data': self.eon.snapshot(),
            'oda_list': self.oda.snapshot(),
            'rt_plus_data': self.rtplus.snapshot(),
            'group_stats': self.get_group_stats(),
            'ber': self.get_ber(),
            'stable_flags': self.get_stable_flags(),
        }
