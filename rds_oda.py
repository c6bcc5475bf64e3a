#!/usr/bin/env python3
"""
Open Data Applications (group 3A) and RadioText+ tag extraction.

Group 3A announces which group type carries an application's payload:

    block B bits 4..0  target group code (type << 1 | version)
    block C            application message
    block D            application id (AID)

RadioText+ payload (37 bits spread over blocks B, C and D):

    B[4]        item toggle
    B[3]        item running
    B[2..0] C[15..13]   tag 1 content type (6 bits)
    C[12..7]            tag 1 start marker (6 bits)
    C[6..1]             tag 1 length marker (6 bits)
    C[0] D[15..11]      tag 2 content type (6 bits)
    D[10..5]            tag 2 start marker (6 bits)
    D[4..0]             tag 2 length marker (5 bits)

The length marker is the tag length minus one.
"""

import logging

from rds_bits import getbit, getbits, group_label, hex4
from rds_lists import RTPLUS_AIDS, oda_name, rtplus_tag_name

logger = logging.getLogger(__name__)

GROUP_NOT_CARRIED = 0x00
GROUP_ENCODER_ERROR = 0x1F

# Slices ending past this index come from corrupt start/length fields
RTPLUS_MAX_END = 69


class ODARegistry:
    """Recently announced ODAs, newest first, unique by AID."""

    def __init__(self, capacity=5):
        self.capacity = capacity
        self.reset()

    def reset(self):
        self.entries = []
        self.rtplus_group = None

    def register(self, aid, target_code, now_ms):
        """
        Record an ODA announcement.

        Args:
            aid: 16-bit application id (block D)
            target_code: 5-bit group code carrying the payload
            now_ms: timestamp in milliseconds

        Returns:
            The stored entry dict.
        """
        carried = target_code not in (GROUP_NOT_CARRIED, GROUP_ENCODER_ERROR)
        group = group_label(target_code) if carried else None

        for entry in self.entries:
            if entry['aid_code'] == aid:
                entry['group'] = group
                entry['last_seen'] = now_ms
                break
        else:
            entry = {
                'aid_code': aid,
                'aid': hex4(aid),
                'name': oda_name(aid),
                'group': group,
                'last_seen': now_ms,
            }
            self.entries.insert(0, entry)
            del self.entries[self.capacity:]

        if aid in RTPLUS_AIDS and carried and self.rtplus_group != target_code:
            self.rtplus_group = target_code
            logger.debug("RT+ payload registered on group %s", group)
        return entry

    def snapshot(self):
        return [
            {'aid': e['aid'], 'name': e['name'], 'group': e['group']}
            for e in self.entries
        ]


def _clean(text):
    return ''.join(ch for ch in text if ch.isprintable()).strip()


def parse_rtplus(block_b, block_c, block_d):
    """Return (item_toggle, item_running, [(content_type, start, length_marker), ...])."""
    toggle = bool(getbit(block_b, 4))
    running = bool(getbit(block_b, 3))
    tag1 = (
        (getbits(block_b, 0, 3) << 3) | getbits(block_c, 13, 3),
        getbits(block_c, 7, 6),
        getbits(block_c, 1, 6),
    )
    tag2 = (
        (getbit(block_c, 0) << 5) | getbits(block_d, 11, 5),
        getbits(block_d, 5, 6),
        getbits(block_d, 0, 5),
    )
    return toggle, running, [tag1, tag2]


class RTPlusTags:
    """RadioText+ tags keyed by content type, least recently updated evicted."""

    def __init__(self, capacity=6):
        self.capacity = capacity
        self.reset()

    def reset(self):
        self.tags = {}
        self.item_toggle = None
        self.item_running = False

    def update(self, block_b, block_c, block_d, radiotext, side, now_ms):
        """
        Extract tags from one RT+ group against the active RadioText.

        Args:
            radiotext: full-width rendering of the active RadioText side,
                with control codes kept so they can be stripped here
            side: active RadioText A/B flag
        """
        self.item_toggle, self.item_running, tags = parse_rtplus(block_b, block_c, block_d)
        for content_type, start, length in tags:
            self.apply(content_type, start, length, radiotext, side, now_ms)

    def apply(self, content_type, start, length, radiotext, side, now_ms):
        """Store a single tag. Returns the stored text or None."""
        if content_type == 0:
            return None
        end = start + length + 1
        if end > RTPLUS_MAX_END:
            return None
        text = _clean(radiotext[start:end])
        if not text:
            return None

        # Re-insert so dict order follows update order
        self.tags.pop(content_type, None)
        self.tags[content_type] = {
            'start': start,
            'length': length,
            'text': text,
            'timestamp': now_ms,
            'side': side,
            'stale': False,
        }
        while len(self.tags) > self.capacity:
            oldest = min(self.tags, key=lambda ct: self.tags[ct]['timestamp'])
            del self.tags[oldest]
        return text

    def mark_stale(self, active_side):
        """Flag tags taken from the RadioText side that is no longer active."""
        for tag in self.tags.values():
            if tag['side'] != active_side:
                tag['stale'] = True

    def snapshot(self):
        return {
            'item_toggle': self.item_toggle,
            'item_running': self.item_running,
            'tags': [
                {
                    'content_type': ct,
                    'name': rtplus_tag_name(ct),
                    'text': tag['text'],
                    'start': tag['start'],
                    'length': tag['length'],
                    'timestamp': tag['timestamp'],
                    'stale': tag['stale'],
                }
                for ct, tag in sorted(self.tags.items())
            ],
        }
