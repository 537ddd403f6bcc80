"""Tests for timegrid.core.grid_mapper — snapping and row/time conversion."""

from datetime import date, datetime, time

import pytest

from timegrid.core.grid_mapper import (
    SnapMode,
    drag_grid_range,
    grid_row_to_time,
    hour_fraction,
    limit_datetime,
    nearest,
    pixel_to_grid_row,
    range_for_day,
    row_to_pixels,
    time_to_grid_row,
    unsnapped_row,
)
from timegrid.core.options import TimeGridOptions

TABLE = (0, 0.5)
QUARTERS = (0, 0.25, 0.5, 0.75)


# ---------------------------------------------------------------------------
# hour_fraction
# ---------------------------------------------------------------------------


class TestHourFraction:
    def test_exact_cell_uses_table(self):
        assert hour_fraction(30, 30, TABLE) == 0.5

    def test_zero_minutes(self):
        assert hour_fraction(0, 30, TABLE) == 0

    def test_between_cells_falls_back_to_ratio(self):
        assert hour_fraction(15, 30, TABLE) == 0.25

    def test_fallback_rounds_to_two_decimals(self):
        assert hour_fraction(10, 30, TABLE) == 0.17
        assert hour_fraction(20, 30, TABLE) == 0.33
        assert hour_fraction(59, 30, TABLE) == 0.98

    def test_index_past_table_falls_back(self):
        assert hour_fraction(60, 30, TABLE) == 1.0

    def test_quarter_table(self):
        assert hour_fraction(15, 15, QUARTERS) == 0.25
        assert hour_fraction(45, 15, QUARTERS) == 0.75
        assert hour_fraction(20, 15, QUARTERS) == 0.33

    def test_every_minute_of_the_hour(self):
        for minutes in range(60):
            index = minutes / 15
            if index.is_integer() and QUARTERS[int(index)]:
                expected = QUARTERS[int(index)]
            else:
                expected = round(minutes / 60, 2)
            assert hour_fraction(minutes, 15, QUARTERS) == expected, minutes


class TestTimeToGridRow:
    def test_half_hour(self):
        assert time_to_grid_row(datetime(2026, 10, 19, 9, 30), 0, 30, TABLE) == 9.5

    def test_relative_to_hour_start(self):
        assert time_to_grid_row(datetime(2026, 10, 19, 9, 30), 8, 30, TABLE) == 1.5

    def test_off_grid_minutes(self):
        assert time_to_grid_row(time(9, 10), 0, 30, TABLE) == pytest.approx(9.17)


# ---------------------------------------------------------------------------
# pixel_to_grid_row
# ---------------------------------------------------------------------------


class TestPixelToGridRow:
    def test_unsnapped_ratio(self):
        assert unsnapped_row(925, 2400, 24) == 9.25

    def test_bottom_snaps_forward(self):
        assert pixel_to_grid_row(925, 2400, 24, SnapMode.BOTTOM, TABLE) == 9.5

    def test_top_snaps_backward(self):
        assert pixel_to_grid_row(925, 2400, 24, SnapMode.TOP, TABLE) == 9.0

    def test_none_picks_nearest(self):
        assert pixel_to_grid_row(975, 2400, 24, SnapMode.NONE, TABLE) == 9.5
        assert pixel_to_grid_row(910, 2400, 24, SnapMode.NONE, TABLE) == 9.0

    def test_none_tie_prefers_first_breakpoint(self):
        assert pixel_to_grid_row(925, 2400, 24, SnapMode.NONE, TABLE) == 9.0

    def test_bottom_rolls_into_next_hour(self):
        assert pixel_to_grid_row(970, 2400, 24, SnapMode.BOTTOM, TABLE) == 10.0

    def test_top_past_last_breakpoint(self):
        assert pixel_to_grid_row(970, 2400, 24, SnapMode.TOP, TABLE) == 9.5

    def test_exact_grid_line(self):
        assert pixel_to_grid_row(900, 2400, 24, SnapMode.TOP, TABLE) == 9.0
        assert pixel_to_grid_row(900, 2400, 24, SnapMode.BOTTOM, TABLE) == 9.0

    def test_exact_half_hour_top_is_strict(self):
        assert pixel_to_grid_row(950, 2400, 24, SnapMode.TOP, TABLE) == 9.0
        assert pixel_to_grid_row(950, 2400, 24, SnapMode.BOTTOM, TABLE) == 9.5

    def test_above_grid(self):
        assert pixel_to_grid_row(-50, 2400, 24, SnapMode.TOP, TABLE) == -1.0
        assert pixel_to_grid_row(-50, 2400, 24, SnapMode.BOTTOM, TABLE) == -0.5

    @pytest.mark.parametrize("mode", list(SnapMode))
    def test_monotonic_in_pixel(self, mode):
        rows = [pixel_to_grid_row(y, 2400, 24, mode, TABLE) for y in range(-100, 2500, 7)]
        assert rows == sorted(rows)

    def test_shorter_grid(self):
        # 12 hour span on 1200px: 100px per hour as well
        assert pixel_to_grid_row(325, 1200, 12, SnapMode.BOTTOM, TABLE) == 3.5

    def test_row_to_pixels_inverts_ratio(self):
        assert row_to_pixels(9.25, 24, 2400) == 925


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


class TestRanges:
    def test_range_for_full_day(self):
        rng = range_for_day(date(2026, 10, 19), TimeGridOptions())
        assert rng.start_row == 0
        assert rng.start_time == datetime(2026, 10, 19, 0, 0)
        assert rng.end_time == datetime(2026, 10, 19, 23, 59, 59)
        assert rng.end_row == pytest.approx(23.98)

    def test_range_for_working_hours(self):
        rng = range_for_day(datetime(2026, 10, 19, 15, 0), TimeGridOptions(hour_start=8, hour_end=20))
        assert rng.start_row == 0
        assert rng.start_time == datetime(2026, 10, 19, 8, 0)
        assert rng.end_row == pytest.approx(11.98)

    def test_cross_midnight_pins_end_to_grid_bottom(self):
        rng = drag_grid_range(
            datetime(2026, 10, 19, 22, 0), datetime(2026, 10, 20, 1, 0), TimeGridOptions(),
        )
        assert rng.start_row == 22
        assert rng.end_row == 24

    def test_same_day_range(self):
        rng = drag_grid_range(
            datetime(2026, 10, 19, 9, 0), datetime(2026, 10, 19, 10, 30), TimeGridOptions(),
        )
        assert (rng.start_row, rng.end_row) == (9, 10.5)


class TestConversions:
    def test_row_to_time(self):
        assert grid_row_to_time(date(2026, 10, 19), 9.5, 0) == datetime(2026, 10, 19, 9, 30)

    def test_row_to_time_rounds_to_minutes(self):
        assert grid_row_to_time(date(2026, 10, 19), 9.17, 0) == datetime(2026, 10, 19, 9, 10)

    def test_row_to_time_with_hour_start(self):
        assert grid_row_to_time(date(2026, 10, 19), 9.5, 8) == datetime(2026, 10, 19, 17, 30)

    def test_row_past_midnight(self):
        assert grid_row_to_time(date(2026, 10, 19), 24.5, 0) == datetime(2026, 10, 20, 0, 30)

    def test_limit_datetime(self):
        lower = datetime(2026, 10, 19)
        upper = datetime(2026, 10, 20)
        assert limit_datetime(datetime(2026, 10, 18, 23), lower, upper) == lower
        assert limit_datetime(datetime(2026, 10, 20, 1), lower, upper) == upper
        assert limit_datetime(datetime(2026, 10, 19, 12), lower, upper) == datetime(2026, 10, 19, 12)

    def test_nearest(self):
        assert nearest(0.3, (0, 0.5)) == 0.5
        assert nearest(0.1, (0, 0.5)) == 0
