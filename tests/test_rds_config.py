#!/usr/bin/env python3
"""Tests for decoder configuration loading."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

from rds_config import DecoderConfig, load_config


def test_defaults_without_file(tmp_path):
    config = load_config(str(tmp_path / 'missing.cfg'), environ={})
    assert config == DecoderConfig()
    assert config.pi_confirm_count == 4
    assert config.stable_ms == 2000
    assert config.grace_ms == 3000
    assert config.ber_window == 40
    assert config.oda_history == 5
    assert config.rtplus_max_tags == 6
    assert config.rbds is False


def test_file_values(tmp_path):
    path = tmp_path / 'pyrds.cfg'
    path.write_text("[decoder]\nrbds = yes\nstable_ms = 1500\n")
    config = load_config(str(path), environ={})
    assert config.rbds is True
    assert config.stable_ms == 1500
    assert config.pi_confirm_count == 4


def test_environment_overrides_file(tmp_path):
    path = tmp_path / 'pyrds.cfg'
    path.write_text("[decoder]\nrbds = true\ngrace_ms = 1000\n")
    config = load_config(str(path), environ={'PYRDS_RBDS': '0', 'PYRDS_BER_WINDOW': '20'})
    assert config.rbds is False
    assert config.grace_ms == 1000
    assert config.ber_window == 20


def test_invalid_values_ignored(tmp_path, caplog):
    path = tmp_path / 'pyrds.cfg'
    path.write_text("[decoder]\npi_confirm_count = 0\nstable_ms = soon\n")
    with caplog.at_level('WARNING', logger='rds_config'):
        config = load_config(str(path), environ={'PYRDS_RBDS': 'maybe'})
    assert config == DecoderConfig()
    assert 'pi_confirm_count' in caplog.text
    assert 'rbds' in caplog.text


def test_unreadable_file_ignored(tmp_path):
    path = tmp_path / 'pyrds.cfg'
    path.write_text("this is not an ini file\n")
    assert load_config(str(path), environ={}) == DecoderConfig()
