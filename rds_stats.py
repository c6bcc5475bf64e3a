#!/usr/bin/env python3
"""
Link quality and decode statistics.

- GroupStats: per-group-type histogram
- BERWindow: sliding window of record-level error samples
- StabilityTracker: "unchanged for N ms" debounce for rendered text
"""

from collections import deque

from rds_bits import group_sort_key

BER_UNKNOWN = -1


class GroupStats:
    """Count of decoded groups per label ('0A', '2B', ...)."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.counts = {}
        self.total = 0

    def add(self, label):
        self.total += 1
        self.counts[label] = self.counts.get(label, 0) + 1

    def rows(self):
        """Rows sorted by numeric group type, with percentage of total."""
        total = max(1, self.total)
        return [
            {
                'group': label,
                'count': count,
                'percent': round(count / total * 100, 1),
            }
            for label, count in sorted(self.counts.items(), key=lambda kv: group_sort_key(kv[0]))
        ]


class BERWindow:
    """
    Fixed-capacity window of record samples (0 = clean, 1 = error).

    The reported rate is withheld (BER_UNKNOWN) until a PI has been
    established for at least grace_ms.
    """

    def __init__(self, capacity=40, grace_ms=3000):
        self.grace_ms = grace_ms
        self._samples = deque(maxlen=capacity)

    def add(self, error):
        self._samples.append(1 if error else 0)

    def clear(self):
        self._samples.clear()

    def __len__(self):
        return len(self._samples)

    def ber(self, pi_established_ms, now_ms):
        if pi_established_ms is None:
            return BER_UNKNOWN
        if now_ms - pi_established_ms < self.grace_ms:
            return BER_UNKNOWN
        if not self._samples:
            return BER_UNKNOWN
        return sum(self._samples) / len(self._samples) * 100


class StabilityTracker:
    """Tracks how long a rendered value has remained unchanged."""

    def __init__(self, stable_ms=2000):
        self.stable_ms = stable_ms
        self.reset()

    def reset(self):
        self.value = None
        self.since = None
        self.last_stable = None

    def observe(self, value, now_ms):
        if value != self.value:
            self.value = value
            self.since = now_ms

    def is_stable(self, now_ms):
        if self.since is None:
            return False
        return now_ms - self.since >= self.stable_ms

    def stable_value(self, now_ms):
        """Most recent value seen stable on read, None until there is one."""
        if self.is_stable(now_ms):
            self.last_stable = self.value
        return self.last_stable
