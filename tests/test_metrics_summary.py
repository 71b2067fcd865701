from __future__ import annotations

import pandas as pd
import pytest

from core.metrics_summary import calculate_column_statistics, calculate_percentile, running_total


class TestCalculatePercentile:
    def test_empty(self) -> None:
        assert calculate_percentile([], 50) == 0

    def test_single_value(self) -> None:
        assert calculate_percentile([42], 50) == 42
        assert calculate_percentile([42], 0) == 42

    def test_median_odd_and_even(self) -> None:
        assert calculate_percentile([1, 2, 3, 4, 5], 50) == 3
        assert calculate_percentile([1, 2, 3, 4], 50) == 2.5

    def test_interpolated_quartiles(self) -> None:
        ordered = [1, 2, 3, 4, 5, 6, 7, 8]
        assert calculate_percentile(ordered, 25) == 2.75
        assert calculate_percentile(ordered, 75) == 6.25

    @pytest.mark.parametrize("ordered", [[1, 2, 3, 4, 5], [-3.5, 0, 0, 12], [7, 7]])
    def test_boundaries(self, ordered) -> None:
        assert calculate_percentile(ordered, 0) == ordered[0]
        assert calculate_percentile(ordered, 100) == ordered[-1]


class TestColumnStatistics:
    amounts = [{"amt": 100}, {"amt": 200}, {"amt": 300}, {"amt": 400}, {"amt": 500}]

    def test_all_fields(self) -> None:
        s = calculate_column_statistics(self.amounts, "amt", "Amount")
        assert s.name == "amt"
        assert s.label == "Amount"
        assert s.sum == 1500
        assert s.avg == 300
        assert s.min == 100
        assert s.max == 500
        assert s.median == 300
        assert s.std_dev == pytest.approx(141.42, abs=0.01)
        assert s.count == 5
        assert s.non_null_count == 5

    def test_percentiles(self) -> None:
        s = calculate_column_statistics(self.amounts, "amt", "Amount")
        assert s.p25 == 200
        assert s.p75 == 400
        assert s.p90 == pytest.approx(460)
        assert s.p95 == pytest.approx(480)

    def test_missing_values(self) -> None:
        data = [{"amt": 100}, {"amt": None}, {"amt": 300}, {}, {"amt": ""}, {"amt": 500}, {"amt": "n/a"}]
        s = calculate_column_statistics(data, "amt", "Amount")
        assert s.non_null_count == 3
        assert s.count == 7
        assert s.sum == 900
        assert s.avg == 300

    def test_no_numbers_is_distinguishable_from_zeros(self) -> None:
        empty = calculate_column_statistics([{"amt": None}, {"amt": "x"}], "amt", "Amount")
        zeros = calculate_column_statistics([{"amt": 0}, {"amt": 0}], "amt", "Amount")
        assert empty.sum == zeros.sum == 0
        assert empty.count == 2 and empty.non_null_count == 0
        assert zeros.non_null_count == 2

    def test_empty_table(self) -> None:
        s = calculate_column_statistics([], "amt", "Amount")
        assert (s.sum, s.avg, s.min, s.max, s.median, s.std_dev) == (0, 0, 0, 0, 0, 0)
        assert (s.p25, s.p75, s.p90, s.p95) == (0, 0, 0, 0)
        assert s.count == 0 and s.non_null_count == 0

    def test_string_numbers(self) -> None:
        s = calculate_column_statistics([{"amt": "100"}, {"amt": " 200 "}, {"amt": "300"}], "amt", "Amount")
        assert s.sum == 600
        assert s.avg == 200
        assert s.non_null_count == 3

    def test_population_std_dev(self) -> None:
        s = calculate_column_statistics([{"v": 2}, {"v": 4}, {"v": 4}, {"v": 4}, {"v": 5}, {"v": 5}, {"v": 7}, {"v": 9}], "v", "V")
        assert s.std_dev == 2.0

    def test_min_max_from_unsorted_input(self) -> None:
        s = calculate_column_statistics([{"v": 5}, {"v": -2}, {"v": 9}, {"v": 1}], "v", "V")
        assert (s.min, s.max, s.median) == (-2, 9, 3)

    def test_dataframe_input_is_not_mutated(self) -> None:
        df = pd.DataFrame({"amt": [1.0, None, 3.0]})
        before = df.copy()
        s = calculate_column_statistics(df, "amt", "Amount")
        assert s.count == 3 and s.non_null_count == 2 and s.sum == 4
        pd.testing.assert_frame_equal(df, before)

    def test_sum_adds_in_row_order(self) -> None:
        s = calculate_column_statistics([{"amt": 0.1}] * 10, "amt", "Amount")
        assert s.sum == 0.9999999999999999
        assert s.avg == 0.9999999999999999 / 10


class TestRunningTotal:
    def test_left_to_right(self) -> None:
        assert running_total([0.1] * 10) == 0.9999999999999999

    def test_order_matters(self) -> None:
        assert running_total([1e16, 1.0, -1e16]) == 0.0
        assert running_total([1.0, 1e16, -1e16]) == 0.0
        assert running_total([1e16, -1e16, 1.0]) == 1.0

    def test_empty(self) -> None:
        assert running_total([]) == 0.0
