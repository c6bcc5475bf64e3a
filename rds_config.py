#!/usr/bin/env python3
"""
Decoder configuration.

Values come from, in increasing priority:
  1. DecoderConfig defaults
  2. [decoder] section of pyrds.cfg (next to this module, or an explicit path)
  3. PYRDS_<FIELD> environment variables, e.g. PYRDS_RBDS=1

Invalid values are logged and ignored; the defaults stay in effect.

Example pyrds.cfg:

    [decoder]
    rbds = true
    pi_confirm_count = 4
    stable_ms = 2000
"""

import configparser
import logging
import os
from dataclasses import dataclass, fields, replace

logger = logging.getLogger(__name__)

CONFIG_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'pyrds.cfg')
CONFIG_SECTION = 'decoder'
ENV_PREFIX = 'PYRDS_'

_TRUE = ('1', 'true', 'yes', 'on')
_FALSE = ('0', 'false', 'no', 'off')


@dataclass(frozen=True)
class DecoderConfig:
    pi_confirm_count: int = 4       # consecutive identical PIs to accept a change
    stable_ms: int = 2000           # PS/PTYN/RT unchanged this long = stable
    grace_ms: int = 3000            # after PI change: BER unknown, flags unstable
    ber_window: int = 40            # records in the BER window
    oda_history: int = 5
    rtplus_max_tags: int = 6
    eon_mapped_max: int = 10
    rbds: bool = False              # North American PTY names + call letters


def _convert(field_type, raw):
    raw = raw.strip()
    if field_type in (bool, 'bool'):
        lowered = raw.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    value = int(raw)
    if value < 1:
        raise ValueError(f"must be positive: {raw!r}")
    return value


def _apply(config, values, source):
    updates = {}
    for field in fields(config):
        if field.name not in values:
            continue
        try:
            updates[field.name] = _convert(field.type, values[field.name])
        except ValueError as e:
            logger.warning("Ignoring %s from %s: %s", field.name, source, e)
    return replace(config, **updates) if updates else config


def load_config(path=None, environ=None):
    """
    Build a DecoderConfig from the config file and environment.

    Args:
        path: INI file to read (default: CONFIG_FILE; missing file is fine)
        environ: mapping used for overrides (default: os.environ)
    """
    config = DecoderConfig()
    path = path or CONFIG_FILE
    environ = os.environ if environ is None else environ

    if os.path.exists(path):
        parser = configparser.ConfigParser()
        try:
            parser.read(path)
            if parser.has_section(CONFIG_SECTION):
                config = _apply(config, dict(parser.items(CONFIG_SECTION)), path)
        except configparser.Error as e:
            logger.warning("Ignoring invalid config file %s: %s", path, e)

    env_values = {}
    for field in fields(config):
        key = ENV_PREFIX + field.name.upper()
        if key in environ:
            env_values[field.name] = environ[key]
    return _apply(config, env_values, 'environment')
