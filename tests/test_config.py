import pytest

from gridsnake.config import (
    DEFAULT_TICK_MS, MIN_GRID_SIZE, PALETTES, Config, ConfigurationError,
    Settings, Theme, hex_color, step_speed,
)


def test_defaults_are_valid():
    cfg = Config()
    assert cfg.grid_size == 20
    assert cfg.tick_period_ms == DEFAULT_TICK_MS


@pytest.mark.parametrize("grid_size", [0, -5, MIN_GRID_SIZE - 1, True, 20.0, "20"])
def test_bad_grid_size_fails_fast(grid_size):
    with pytest.raises(ConfigurationError):
        Config(grid_size=grid_size)


@pytest.mark.parametrize("period", [0, -1, False, 1.5, None])
def test_bad_tick_period_fails_fast(period):
    with pytest.raises(ConfigurationError):
        Config(tick_period_ms=period)


def test_configuration_error_is_a_value_error():
    assert issubclass(ConfigurationError, ValueError)


def test_hex_color():
    assert hex_color("#e0f2fe") == (224, 242, 254)
    assert hex_color("020617") == (2, 6, 23)


def test_theme_parse_and_cycle():
    assert Theme.parse("normal") is Theme.NORMAL
    assert Theme.parse("neon") is Theme.SKY
    assert Theme.parse(None) is Theme.SKY
    assert Theme.SKY.next() is Theme.NORMAL
    assert Theme.NORMAL.next() is Theme.SKY


def test_every_theme_has_a_palette():
    assert set(PALETTES) == set(Theme)
    assert PALETTES[Theme.SKY].background != PALETTES[Theme.NORMAL].background


def test_settings_from_dict_falls_back_on_bad_fields():
    s = Settings.from_dict({"name": "  ", "theme": "purple", "speedMs": -3})
    assert s == Settings()

    s = Settings.from_dict({"name": " Ada ", "theme": "normal", "speedMs": 80})
    assert s == Settings(name="Ada", theme=Theme.NORMAL, speed_ms=80)

    assert Settings.from_dict(None) == Settings()
    assert Settings.from_dict([1, 2]) == Settings()


def test_settings_to_dict_uses_stored_keys():
    data = Settings(name="Ada", theme=Theme.NORMAL, speed_ms=160).to_dict()
    assert data == {"name": "Ada", "theme": "normal", "speedMs": 160}
    assert Settings.from_dict(data) == Settings(name="Ada", theme=Theme.NORMAL, speed_ms=160)


def test_step_speed_walks_presets_and_stops_at_ends():
    assert step_speed(120, faster=True) == 80
    assert step_speed(80, faster=True) == 80
    assert step_speed(120, faster=False) == 160
    assert step_speed(160, faster=False) == 160
    # off-preset values snap to the nearest preset in that direction
    assert step_speed(100, faster=True) == 80
    assert step_speed(100, faster=False) == 120
