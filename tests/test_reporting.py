"""Tests for reports and shared utilities."""

import json
import logging
import os

import numpy as np
import pytest

from spatial_network.reporting import generate_network_report
from spatial_network.utils import convert_time_format, save_json, setup_logging


class TestGenerateNetworkReport:

    def test_writes_all_formats(self, tmp_path):
        metrics = {'num_nodes': 5, 'num_edges': 6, 'density': 0.6}

        paths = generate_network_report(metrics, str(tmp_path), extra={'shortest_path': {'length': 200.0}})

        assert set(paths) == {'json', 'text', 'markdown'}
        for path in paths.values():
            assert os.path.exists(path)

        with open(paths['json'], encoding='utf-8') as f:
            report = json.load(f)
        assert report['network_statistics']['num_edges'] == 6
        assert report['shortest_path']['length'] == 200.0

        with open(paths['markdown'], encoding='utf-8') as f:
            markdown = f.read()
        assert '## Network Statistics' in markdown
        assert '- **Num Nodes:** 5' in markdown

        with open(paths['text'], encoding='utf-8') as f:
            assert 'Density: 0.600000' in f.read()


class TestUtils:

    def test_json_roundtrip_with_numpy(self, tmp_path):
        path = str(tmp_path / 'nested' / 'data.json')

        save_json({'a': np.int64(3), 'b': np.float32(0.5), 'c': np.array([1, 2])}, path)

        with open(path, encoding='utf-8') as f:
            assert json.load(f) == {'a': 3, 'b': 0.5, 'c': [1, 2]}

    def test_setup_logging_is_idempotent(self, tmp_path):
        log_file = str(tmp_path / 'run.log')

        setup_logging(log_file, 'DEBUG')
        logger = setup_logging(log_file, 'DEBUG')

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        logger.info('hello')
        for handler in list(logger.handlers):
            handler.flush()
            logger.removeHandler(handler)
            handler.close()
        with open(log_file) as f:
            assert f.read().count('hello') == 1

    def test_setup_logging_rejects_bad_level(self):
        with pytest.raises(ValueError):
            setup_logging(level='LOUD')

    @pytest.mark.parametrize('seconds,expected', [
        (5, '5s'),
        (65, '1m 5s'),
        (3725, '1h 2m 5s'),
    ])
    def test_convert_time_format(self, seconds, expected):
        assert convert_time_format(seconds) == expected
