from __future__ import annotations

from asset_chisel.core.intervals import active_interval, earliest_start, rate_for_year
from asset_chisel.schemas.asset import ReturnRateInterval


def interval(start: int, end: int, rate: float) -> ReturnRateInterval:
    return ReturnRateInterval(startYear=start, endYear=end, ratePercent=rate)


def test_rate_is_found_inside_range_inclusive():
    rates = [interval(1, 10, 5.0), interval(11, 20, 3.0)]

    assert rate_for_year(1, rates) == 5.0
    assert rate_for_year(10, rates) == 5.0
    assert rate_for_year(11, rates) == 3.0
    assert rate_for_year(20, rates) == 3.0


def test_gap_or_no_intervals_means_zero_rate():
    rates = [interval(1, 5, 4.0), interval(8, 10, 6.0)]

    assert rate_for_year(6, rates) == 0.0
    assert rate_for_year(25, rates) == 0.0
    assert rate_for_year(3, []) == 0.0


def test_overlap_latest_start_wins():
    rates = [interval(5, 15, 7.0), interval(1, 30, 2.0)]

    assert rate_for_year(4, rates) == 2.0
    assert rate_for_year(10, rates) == 7.0
    assert rate_for_year(16, rates) == 2.0


def test_overlap_policy_can_be_swapped():
    rates = [interval(5, 15, 7.0), interval(1, 30, 2.0)]

    assert rate_for_year(10, rates, policy=earliest_start) == 2.0
    assert active_interval(10, rates, policy=earliest_start).startYear == 1


def test_reversed_range_never_matches():
    rates = [interval(10, 5, 9.0)]

    for year in range(0, 12):
        assert rate_for_year(year, rates) == 0.0


def test_equal_start_keeps_first_listed():
    rates = [interval(3, 8, 4.0), interval(3, 12, 9.0)]

    assert rate_for_year(5, rates) == 4.0
    assert rate_for_year(10, rates) == 9.0
