import pytest

from bowlscan.services.scores import (
    best_split, clean_scores, drop_lane_numbers, extract_scores, filter_total, iter_splits, plausibility,
)


@pytest.mark.parametrize("digits,expected", [
    ("180", [180]),
    ("0", [0]),
    ("7", [7]),
    ("300", [300]),
    ("301", [301]),      # 3-digit running total, dropped later
    ("999", [999]),
    ("0123", [123]),
])
def test_extract_single_values(digits, expected):
    assert extract_scores(digits) == expected


def test_extract_rejects_non_digits():
    assert extract_scores("") == []
    assert extract_scores("18a") == []
    assert extract_scores("١٢٣") == []


def test_split_three_concatenated_games():
    assert extract_scores("180200195") == [180, 200, 195]


def test_split_prefers_plausible_values():
    # (214, 0) scores 1000 - 200 and beats (2, 140) and (21, 40)
    assert plausibility([214, 0]) == 800
    assert plausibility([2, 140]) == 500
    assert plausibility([21, 40]) == 200
    assert best_split("2140") == [214, 0]
    # the lane filter then strips the stray zero
    assert clean_scores(extract_scores("2140")) == [214]


def test_split_ties_keep_first_found():
    # (111, 1) and (1, 111) both weigh 500
    assert plausibility([111, 1]) == plausibility([1, 111]) == 500
    assert best_split("1111") == [111, 1]


def test_split_rejects_leading_zero_pieces():
    assert list(iter_splits("1005")) == [(100, 5), (10, 0, 5), (1, 0, 0, 5)]


def test_split_order_is_longest_first():
    assert next(iter_splits("123456")) == (123, 456)


def test_split_of_repeated_digits():
    assert best_split("9999") == [99, 99]


def test_overlong_runs_are_not_split():
    assert extract_scores("1" * 16) == []
    assert extract_scores("1" * 16, max_digits=20) != []


def test_lane_numbers_dropped_only_next_to_real_scores():
    assert drop_lane_numbers([3, 180, 200, 195]) == [180, 200, 195]
    assert drop_lane_numbers([3, 50, 60]) == [3, 50, 60]


def test_totals_above_300_always_removed():
    assert filter_total([180, 200, 195, 575]) == [180, 200, 195]
    assert filter_total([575]) == []


def test_total_column_within_tolerance():
    # 240 == 90 + 80 + 70
    assert filter_total([90, 80, 70, 240]) == [70, 80, 90]


def test_no_total_keeps_top_three_sorted():
    assert filter_total([150, 160, 170, 290]) == [160, 170, 290]
    assert filter_total([200, 100, 120, 110, 105]) == [110, 120, 200]


def test_three_or_fewer_keep_game_order():
    assert filter_total([200, 150, 180]) == [200, 150, 180]
