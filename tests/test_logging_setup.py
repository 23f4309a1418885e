"""
Logging Setup Tests

Level selection from the LOG_LEVEL environment variable.

Run with: pytest tests/test_logging_setup.py -v
"""

import logging
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from phaseplant.logging_setup import CODEC_LOGGER, configure_logging


class TestConfigureLogging:
    """Process wide logging configuration"""

    @pytest.fixture(autouse=True)
    def clean_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("PHASEPLANT_LOG_LEVEL", raising=False)
        yield
        logging.getLogger(CODEC_LOGGER).setLevel(logging.NOTSET)

    def test_default_level(self):
        """Without LOG_LEVEL the default is used"""
        assert configure_logging() == logging.WARNING
        assert logging.getLogger().level == logging.WARNING

    def test_environment_level(self, monkeypatch):
        """LOG_LEVEL is case insensitive"""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert configure_logging() == logging.DEBUG
        assert logging.getLogger("phaseplant.preset").isEnabledFor(logging.DEBUG)

    def test_invalid_level(self, monkeypatch, capsys):
        """Unknown names fall back to the default and say so"""
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert configure_logging(default_level="INFO") == logging.INFO
        assert "Invalid LOG_LEVEL 'CHATTY'" in capsys.readouterr().out

    def test_codec_level_argument(self):
        """The codec loggers can trace while the rest stays quiet"""
        configure_logging(codec_level="debug")
        assert logging.getLogger("phaseplant.preset").isEnabledFor(logging.DEBUG)
        assert not logging.getLogger("other").isEnabledFor(logging.DEBUG)

    def test_codec_level_environment(self, monkeypatch):
        """PHASEPLANT_LOG_LEVEL wins over the argument"""
        monkeypatch.setenv("PHASEPLANT_LOG_LEVEL", "error")
        configure_logging(default_level="DEBUG", codec_level="DEBUG")
        assert logging.getLogger(CODEC_LOGGER).level == logging.ERROR
        assert not logging.getLogger("phaseplant.snapin").isEnabledFor(logging.WARNING)

    def test_codec_level_reset(self):
        """Without a codec level the codec loggers follow the root"""
        configure_logging(codec_level="ERROR")
        configure_logging(default_level="INFO")
        assert logging.getLogger(CODEC_LOGGER).level == logging.NOTSET
        assert logging.getLogger("phaseplant.preset").isEnabledFor(logging.INFO)

    def test_invalid_codec_level(self, monkeypatch, capsys):
        """An unknown codec level is reported and ignored"""
        monkeypatch.setenv("PHASEPLANT_LOG_LEVEL", "loud")
        configure_logging()
        assert "Invalid PHASEPLANT_LOG_LEVEL 'LOUD'" in capsys.readouterr().out
        assert logging.getLogger(CODEC_LOGGER).level == logging.NOTSET


if __name__ == '__main__':
    exit(pytest.main([__file__, '-v']))
