#!/usr/bin/env python3
"""
Enhanced Other Networks (groups 14A/14B).

14A carries one piece of information about another network per group,
selected by the variant code in block B bits 3..0:

    0-3   PS characters (2 per variant)
    4     AF list (method A pair)
    5-9   mapped frequency pair (tuned network -> other network)
    12    linkage information
    13    PTY and TA of the other network
    14    PIN of the other network

Block D always holds the other network's PI. 14B carries TP/TA(ON)
in block B bits 4 and 3.
"""

from rds_bits import af_code_to_mhz, decode_pin, getbit, getbits, hex4
from rds_text import TextGrid


class EONNetwork:
    """State for one other network."""

    def __init__(self, pi, mapped_max=10):
        self.pi = pi
        self.mapped_max = mapped_max
        self.ps = TextGrid(8)
        self.af = []
        self.mapped = []
        self.linkage = None
        self.pty = 0
        self.tp = False
        self.ta = False
        self.pin = None
        self.last_update = 0

    def add_af(self, freqs):
        for freq in freqs:
            if freq is not None and freq not in self.af:
                self.af.append(freq)
        self.af.sort()

    def add_mapping(self, tuned, other):
        if tuned is None or other is None:
            return
        mapping = f"{tuned:.1f} -> {other:.1f}"
        if mapping in self.mapped:
            return
        self.mapped.append(mapping)
        del self.mapped[:-self.mapped_max]

    def snapshot(self):
        return {
            'pi': self.pi,
            'ps': self.ps.render(),
            'ps_complete': self.ps.complete,
            'af': list(self.af),
            'mapped': list(self.mapped),
            'linkage': self.linkage,
            'pty': self.pty,
            'tp': self.tp,
            'ta': self.ta,
            'pin': self.pin,
            'last_update': self.last_update,
        }


class EONTracker:
    """Other-network records keyed by PI hex string, created on first sight."""

    def __init__(self, mapped_max=10):
        self.mapped_max = mapped_max
        self.networks = {}

    def reset(self):
        self.networks = {}

    def _network(self, block_d, now_ms):
        pi = hex4(block_d)
        network = self.networks.get(pi)
        if network is None:
            network = EONNetwork(pi, self.mapped_max)
            self.networks[pi] = network
        network.last_update = now_ms
        return network

    def update_a(self, block_b, block_c, block_d, now_ms):
        network = self._network(block_d, now_ms)
        network.tp = bool(getbit(block_b, 4))
        variant = getbits(block_b, 0, 4)

        if variant <= 3:
            network.ps.write(variant * 2, ((block_c >> 8) & 0xFF, block_c & 0xFF))
        elif variant == 4:
            network.add_af((af_code_to_mhz((block_c >> 8) & 0xFF),
                            af_code_to_mhz(block_c & 0xFF)))
        elif 5 <= variant <= 9:
            network.add_mapping(af_code_to_mhz((block_c >> 8) & 0xFF),
                                af_code_to_mhz(block_c & 0xFF))
        elif variant == 12:
            network.linkage = hex4(block_c)
        elif variant == 13:
            network.pty = getbits(block_c, 11, 5)
            network.ta = bool(getbit(block_c, 0))
        elif variant == 14:
            pin = decode_pin(block_c)
            if pin is not None:
                network.pin = pin
        return network

    def update_b(self, block_b, block_d, now_ms):
        network = self._network(block_d, now_ms)
        network.tp = bool(getbit(block_b, 4))
        network.ta = bool(getbit(block_b, 3))
        return network

    def snapshot(self):
        return {pi: network.snapshot() for pi, network in self.networks.items()}
