import pytest

from binviz.config import AnalysisConfig, check_mode, check_order
from binviz.errors import ConfigurationError


def test_defaults_are_valid() -> None:
    config = AnalysisConfig().validate()
    assert config.max_order == 2
    assert config.scale == "log"
    assert config.workers == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_order": 0},
        {"strategy": "huge"},
        {"scale": "cubic"},
        {"gamma": 0.0},
        {"digraph_layout": "spiral"},
        {"profile_window": 0},
        {"profile_stride": -1},
        {"workers": 0},
    ],
)
def test_invalid_settings_raise(overrides: dict) -> None:
    with pytest.raises(ConfigurationError):
        AnalysisConfig(**overrides).validate()


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("BINVIZ_MAX_ORDER", "4")
    monkeypatch.setenv("BINVIZ_SCALE", "sqrt")
    monkeypatch.setenv("BINVIZ_WORKERS", "3")
    config = AnalysisConfig()
    assert (config.max_order, config.scale, config.workers) == (4, "sqrt", 3)


def test_malformed_environment_override_is_ignored(monkeypatch) -> None:
    monkeypatch.setenv("BINVIZ_MAX_ORDER", "lots")
    assert AnalysisConfig().max_order == 2


def test_order_and_mode_checks() -> None:
    assert check_order(3) == 3
    assert check_mode("trigraph") == "trigraph"
    for bad in (0, -1, 1.5, True, "2"):
        with pytest.raises(ConfigurationError):
            check_order(bad)
    with pytest.raises(ConfigurationError):
        check_mode("digraphs")
