"""
Tests for ImageConfig defaults and environment overrides.
"""

import logging

import pytest

from srec_image.config import DEFAULT_FILL_BYTE, ImageConfig


ENV_VARS = (
    "SREC_IMAGE_FILL_BYTE",
    "SREC_IMAGE_STRICT_BOUNDS",
    "SREC_IMAGE_VERIFY_CHECKSUMS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestImageConfig:
    """Tests for ImageConfig."""

    def test_defaults(self):
        config = ImageConfig()
        assert config.fill_byte == DEFAULT_FILL_BYTE == 0xFF
        assert config.strict_bounds is False
        assert config.verify_checksums is False

    @pytest.mark.parametrize("fill", [-1, 0x100])
    def test_invalid_fill_byte(self, fill):
        with pytest.raises(ValueError, match="fill byte"):
            ImageConfig(fill_byte=fill)

    def test_from_env_defaults(self):
        assert ImageConfig.from_env() == ImageConfig()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SREC_IMAGE_FILL_BYTE", "0x00")
        monkeypatch.setenv("SREC_IMAGE_STRICT_BOUNDS", "yes")
        monkeypatch.setenv("SREC_IMAGE_VERIFY_CHECKSUMS", "1")
        config = ImageConfig.from_env()
        assert config.fill_byte == 0x00
        assert config.strict_bounds is True
        assert config.verify_checksums is True

    def test_from_env_decimal_fill(self, monkeypatch):
        monkeypatch.setenv("SREC_IMAGE_FILL_BYTE", "170")
        assert ImageConfig.from_env().fill_byte == 0xAA

    def test_from_env_false_flags(self, monkeypatch):
        monkeypatch.setenv("SREC_IMAGE_STRICT_BOUNDS", "Off")
        monkeypatch.setenv("SREC_IMAGE_VERIFY_CHECKSUMS", "false")
        config = ImageConfig.from_env()
        assert config.strict_bounds is False
        assert config.verify_checksums is False

    @pytest.mark.parametrize("name,value", [
        ("SREC_IMAGE_FILL_BYTE", "zz"),
        ("SREC_IMAGE_FILL_BYTE", "0x1FF"),
        ("SREC_IMAGE_STRICT_BOUNDS", "maybe"),
    ])
    def test_invalid_env_ignored(self, monkeypatch, caplog, name, value):
        monkeypatch.setenv(name, value)
        with caplog.at_level(logging.WARNING, logger="srec_image.config"):
            config = ImageConfig.from_env()
        assert config == ImageConfig()
        assert name in caplog.text
