#!/usr/bin/env python3
"""
rdsdump - replay captured RDS group records through the decoder

Reads one group per line (as sent by the tuner's data socket), feeds
them to an RDSWorker in batches and prints the final decoded state.

Usage:
    ./rdsdump.py capture.txt
    some-tuner-client | ./rdsdump.py --rbds
    ./rdsdump.py capture.txt --json
    ./rdsdump.py capture.txt --groups

Environment:
    PYRDS_* overrides decoder settings (see rds_config.py)
"""

import argparse
import dataclasses
import json
import logging
import sys

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from rds_config import load_config
from rds_lists import GROUP_DESCRIPTIONS
from rds_worker import RDSWorker

DEFAULT_BATCH_LINES = 50


def _flag(label, value, stable):
    if not stable:
        return Text(label, style="dim")
    return Text(label, style="green bold" if value else "bright_black")


def _format_freqs(freqs):
    return ' '.join(f"{f:.1f}" for f in freqs) if freqs else '-'


def _add_row(table, label, value):
    # Station text is data, never rich markup
    table.add_row(label, Text(value) if isinstance(value, str) else value)


def build_table(data):
    """Build the rich summary table for a decoder snapshot."""
    table = Table(show_header=False, box=box.SIMPLE, padding=(0, 1), expand=False)
    table.add_column("Label", style="cyan", justify="right")
    table.add_column("Value", style="green")

    pi = data.get('pi') or '----'
    if data.get('callsign'):
        pi = f"{pi} ({data['callsign']})"
    _add_row(table, "PI", pi)
    _add_row(table, "PS", f"[{data.get('ps', '')}]")
    if data.get('long_ps'):
        _add_row(table, "Long PS", data['long_ps'])
    _add_row(table, "PTY", f"{data.get('pty', 0)} {data.get('pty_name', '')}")
    if data.get('ptyn'):
        _add_row(table, "PTYN", data['ptyn'])
    _add_row(table, "RT", data.get('rt') or '')
    _add_row(table, "RT A/B", f"{data.get('rt_ab_flag', 'A')}  A: {data.get('rt_a', '')!r}  B: {data.get('rt_b', '')!r}")

    stable = data.get('stable_flags', {})
    flags = Text()
    for label, key in (("TP", 'tp'), ("TA", 'ta'), ("MS", 'ms'), ("ST", 'di_stereo'),
                       ("AH", 'di_artificial_head'), ("CMP", 'di_compressed'),
                       ("dPTY", 'di_dynamic_pty')):
        flags.append(_flag(label, data.get(key), stable.get(key, False)))
        flags.append(" ")
    _add_row(table, "Flags", flags)

    _add_row(table, "AF", f"[{data.get('af_type', 'Unknown')}] {_format_freqs(data.get('af_list'))}")
    for label, key in (("ECC", 'ecc'), ("LIC", 'lic'), ("PIN", 'pin'),
                       ("UTC", 'utc_time'), ("Local", 'local_time')):
        if data.get(key):
            _add_row(table, label, data[key])

    for oda in data.get('oda_list', []):
        _add_row(table, "ODA", f"{oda['aid']} {oda['name']} on {oda['group'] or '-'}")

    rt_plus = data.get('rt_plus_data') or {}
    for tag in rt_plus.get('tags', []):
        style = "dim" if tag['stale'] else "green"
        _add_row(table, "RT+", Text(f"{tag['name']}: {tag['text']}", style=style))

    for pi_on, network in sorted((data.get('eon_data') or {}).items()):
        line = f"{network['ps'].strip() or '--------'} AF {_format_freqs(network['af'])}"
        if network['mapped']:
            line += f"  map {', '.join(network['mapped'])}"
        _add_row(table, f"EON {pi_on}", line)

    groups = ' '.join(f"{row['group']}:{row['percent']}%" for row in data.get('group_stats', []))
    _add_row(table, "Groups", groups or '-')
    ber = data.get('ber', -1)
    _add_row(table, "BER", "--" if ber < 0 else f"{ber:.1f}%")
    return table


def build_group_table(rows):
    """Per-group histogram with a short description of each group type."""
    table = Table(box=box.SIMPLE, padding=(0, 1))
    table.add_column("Group", style="cyan", justify="right")
    table.add_column("Count", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Content", style="dim")
    for row in rows:
        table.add_row(row['group'], str(row['count']), f"{row['percent']:.1f}",
                      GROUP_DESCRIPTIONS.get(row['group'], "ODA / unassigned"))
    return table


def replay(worker, stream, batch_lines=DEFAULT_BATCH_LINES):
    """Feed a text stream to the worker in batches. Returns records read."""
    count = 0
    batch = []
    for line in stream:
        batch.append(line.rstrip('\n'))
        count += 1
        if len(batch) >= batch_lines:
            worker.parse('\n'.join(batch))
            batch = []
    if batch:
        worker.parse('\n'.join(batch))
    return count


def main(argv=None):
    parser = argparse.ArgumentParser(description="Replay RDS group records through the decoder")
    parser.add_argument('input', nargs='?', default='-',
                        help='File of group records, one per line (default: stdin)')
    parser.add_argument('--json', action='store_true',
                        help='Print the snapshot as JSON instead of a table')
    parser.add_argument('--rbds', action='store_true',
                        help='Use RBDS (North American) PTY names and call letters')
    parser.add_argument('--config', default=None,
                        help='Decoder config file (default: pyrds.cfg next to the decoder)')
    parser.add_argument('--batch', type=int, default=DEFAULT_BATCH_LINES,
                        help='Records per parse command (default: %(default)s)')
    parser.add_argument('--groups', action='store_true',
                        help='Also print the group type histogram')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log decoder state transitions')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s %(message)s',
    )

    config = load_config(args.config)
    if args.rbds:
        config = dataclasses.replace(config, rbds=True)

    worker = RDSWorker(config=config)
    worker.start()
    try:
        if args.input == '-':
            count = replay(worker, sys.stdin, max(1, args.batch))
        else:
            try:
                with open(args.input, 'r', encoding='utf-8', errors='replace') as f:
                    count = replay(worker, f, max(1, args.batch))
            except OSError as e:
                print(f"Error: cannot read {args.input}: {e}", file=sys.stderr)
                return 1
        data = worker.get_data()
    finally:
        worker.stop()

    data.pop('type', None)
    if args.json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        console = Console()
        console.print(build_table(data))
        if args.groups:
            console.print(build_group_table(data['group_stats']))
        console.print(f"[cyan]{count}[/] records")
    return 0


if __name__ == "__main__":
    sys.exit(main())
