#!/usr/bin/env python3
"""
Alternate Frequency (AF) list accumulation and Method A/B classification.

AF codes arrive in pairs in block C of group 0A. Method A sends a flat
list of frequencies; Method B sends one list per transmitter, each
starting with a header (225-249 = list length) followed by the tuned
("head") frequency, then pairs in which one member is the head.

The method is never signalled explicitly, so it is inferred from how
well each candidate list's observed frequencies cover its declared
length and how often pairs contain the head.
"""

from rds_bits import af_code_to_mhz, af_header_count


AF_TYPE_UNKNOWN = 'Unknown'
AF_TYPE_A = 'A'
AF_TYPE_B = 'B'

MATCH_RATIO_MIN = 0.35
COVERAGE_MIN = 0.75


class _MethodBCandidate:
    __slots__ = ('head', 'expected', 'observed', 'matches', 'pairs')

    def __init__(self, head, expected):
        self.head = head
        self.expected = expected
        self.observed = set()
        self.matches = 0
        self.pairs = 0

    def covered(self):
        size = len(self.observed)
        if self.expected <= 2:
            return size >= self.expected
        if self.expected > 5 and size > 4:
            return True
        return size >= COVERAGE_MIN * self.expected

    @property
    def match_ratio(self):
        return self.matches / self.pairs if self.pairs else 0.0


class AlternateFrequencies:
    """Accumulates AF codes from 0A groups."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.frequencies = []       # discovery order, unique
        self.head = None
        self.af_type = AF_TYPE_UNKNOWN
        self._candidates = {}       # head MHz -> _MethodBCandidate
        self._open = None
        self._last_block_c = None

    def update(self, block_c):
        """Process block C of a 0A group. Repeats of the same payload are ignored."""
        if block_c == self._last_block_c:
            return False
        self._last_block_c = block_c

        code1 = (block_c >> 8) & 0xFF
        code2 = block_c & 0xFF

        count = af_header_count(code1)
        if count is not None:
            head = af_code_to_mhz(code2)
            if head is not None:
                self._on_header(head, count)
        else:
            self._on_pair(af_code_to_mhz(code1), af_code_to_mhz(code2))

        if self.frequencies:
            self.af_type = self._classify()
        return True

    def _on_header(self, head, count):
        self.head = head
        if head in self.frequencies:
            self.frequencies.remove(head)
        self.frequencies.insert(0, head)

        candidate = self._candidates.get(head)
        if candidate is None:
            candidate = _MethodBCandidate(head, count)
            self._candidates[head] = candidate
        else:
            candidate.expected = count
        self._open = candidate

    def _on_pair(self, f1, f2):
        valid = [f for f in (f1, f2) if f is not None]
        if not valid:
            return
        for freq in valid:
            if freq not in self.frequencies:
                self.frequencies.append(freq)

        candidate = self._open
        if candidate is None:
            return
        candidate.observed.update(valid)
        candidate.pairs += 1
        if candidate.head in valid:
            candidate.matches += 1

    def _classify(self):
        qualified = [c for c in self._candidates.values() if c.covered()]
        if not qualified:
            return AF_TYPE_A
        if len(qualified) > 1 or qualified[0].match_ratio > MATCH_RATIO_MIN:
            return AF_TYPE_B
        return AF_TYPE_A

    def af_list(self):
        if self.af_type == AF_TYPE_B and self.head is not None:
            return [self.head] + [f for f in self.frequencies if f != self.head]
        return list(self.frequencies)

    def candidates(self):
        """Method-B candidate summary, keyed by head frequency."""
        return {
            head: {
                'expected': c.expected,
                'observed': sorted(c.observed),
                'matches': c.matches,
                'pairs': c.pairs,
            }
            for head, c in self._candidates.items()
        }
