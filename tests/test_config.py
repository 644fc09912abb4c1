import pytest

from meanfilter import config
from meanfilter.exceptions import ConfigurationError


def test_unset_and_blank_values_use_defaults(monkeypatch):
    monkeypatch.delenv("MEANFILTER_KERNEL_SIZE", raising=False)
    assert config.kernel_size() == 7

    monkeypatch.setenv("MEANFILTER_KERNEL_SIZE", "  ")
    assert config.kernel_size() == 7

    monkeypatch.delenv("MEANFILTER_MAX_THREADS", raising=False)
    assert config.max_threads() is None


def test_values_are_read_at_call_time(monkeypatch):
    monkeypatch.setenv("MEANFILTER_KERNEL_SIZE", "11")
    monkeypatch.setenv("MEANFILTER_OUTPUT_PATH", "elsewhere.jpg")
    monkeypatch.setenv("MEANFILTER_STRATEGY", "tiles")

    assert config.kernel_size() == 11
    assert config.output_path() == "elsewhere.jpg"
    assert config.strategy() == "tiles"


@pytest.mark.parametrize("value", ["seven", "3.5", "0x7"])
def test_non_integer_value_rejected(monkeypatch, value):
    monkeypatch.setenv("MEANFILTER_KERNEL_SIZE", value)

    with pytest.raises(ConfigurationError, match="MEANFILTER_KERNEL_SIZE must be an integer"):
        config.kernel_size()


def test_below_minimum_rejected(monkeypatch):
    monkeypatch.setenv("MEANFILTER_MAX_THREADS", "0")

    with pytest.raises(ConfigurationError, match=">= 1"):
        config.max_threads()
