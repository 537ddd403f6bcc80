"""Tests for timegrid.core.options and timegrid.config."""

import pytest
from pydantic import ValidationError

from timegrid.config import Settings, _load_settings, settings
from timegrid.core.options import InteractionOptions, TimeDelay, TimeGridOptions


class TestTimeGridOptions:
    def test_defaults(self):
        options = TimeGridOptions()
        assert options.hour_span == 24
        assert options.min_cell_rows == 0.5
        assert options.ratio_hour_grid_y == (0, 0.5)

    def test_working_hours_span(self):
        assert TimeGridOptions(hour_start=8, hour_end=20).hour_span == 12

    def test_quarter_cells(self):
        options = TimeGridOptions(minute_cell=15, ratio_hour_grid_y=[0, 0.25, 0.5, 0.75])
        assert options.min_cell_rows == 0.25
        assert options.ratio_hour_grid_y == (0, 0.25, 0.5, 0.75)

    @pytest.mark.parametrize("bounds", [(10, 10), (12, 8), (-1, 10), (0, 25)])
    def test_rejects_bad_hours(self, bounds):
        with pytest.raises(ValidationError):
            TimeGridOptions(hour_start=bounds[0], hour_end=bounds[1])

    def test_rejects_zero_cell(self):
        with pytest.raises(ValidationError):
            TimeGridOptions(minute_cell=0)

    @pytest.mark.parametrize("table", [[], [0.5, 0], [0, 1.0], [-0.1, 0.5]])
    def test_rejects_bad_table(self, table):
        with pytest.raises(ValidationError):
            TimeGridOptions(ratio_hour_grid_y=table)

    def test_frozen(self):
        options = TimeGridOptions()
        with pytest.raises(ValidationError):
            options.hour_start = 5


class TestInteractionOptions:
    def test_defaults_come_from_settings(self):
        options = InteractionOptions()
        assert options.hover_delay_ms == settings.HOVER_DELAY_MS == 2000
        assert options.click_delay_ms == settings.CLICK_DELAY_MS == 300
        assert not options.show_creation_guide_on_hover
        assert not options.show_creation_guide_on_click

    def test_explicit_delays(self):
        options = InteractionOptions(time_delay=TimeDelay(hover=500, click=150))
        assert options.hover_delay_ms == 500
        assert options.click_delay_ms == 150

    def test_zero_delay_is_honoured(self):
        options = InteractionOptions(time_delay=TimeDelay(hover=0))
        assert options.hover_delay_ms == 0

    def test_disable_dbl_click_drops_click_delay(self):
        options = InteractionOptions(disable_dbl_click=True, time_delay=TimeDelay(click=400))
        assert options.click_delay_ms == 0

    def test_predicates_accept_callables(self):
        options = InteractionOptions(check_expected_condition_hover=lambda point: True)
        assert options.check_expected_condition_hover(None) is True


class TestSettings:
    def test_parses_strings(self):
        parsed = Settings(HOVER_DELAY_MS="1500", LOG_LEVEL="debug")
        assert parsed.HOVER_DELAY_MS == 1500
        assert parsed.LOG_LEVEL == "DEBUG"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CLICK_DELAY_MS", "250")
        monkeypatch.setenv("REPLAY_SCRIPT_PATH", "samples/demo.json")
        loaded = _load_settings()
        assert loaded.CLICK_DELAY_MS == 250
        assert loaded.REPLAY_SCRIPT_PATH == "samples/demo.json"

    @pytest.mark.parametrize("raw", ["-5", "abc", ""])
    def test_rejects_invalid_delay(self, monkeypatch, capsys, raw):
        monkeypatch.setenv("HOVER_DELAY_MS", raw)
        with pytest.raises(SystemExit) as exc_info:
            _load_settings()
        assert exc_info.value.code == 1
        assert "HOVER_DELAY_MS" in capsys.readouterr().err
