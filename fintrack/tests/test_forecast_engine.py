import math
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from fintrack.domains.finance.forecast import (
    ForecastError,
    InvalidInputError,
    aggregate_monthly,
    build_forecast,
    ols_slope,
    project_balances,
)
from fintrack.domains.finance.forecast.aggregator import months_before
from fintrack.domains.finance.forecast.projection import round_money

pytestmark = pytest.mark.unit

AS_OF = date(2024, 6, 30)


def _projection_kwargs(**overrides):
    kwargs = dict(
        current_balance=1000,
        average_income=5000,
        average_expense=3000,
        income_trend=0,
        expense_trend=0,
        periods=3,
    )
    kwargs.update(overrides)
    return kwargs


# --- aggregator ---


def test_aggregate_groups_by_month_and_sorts_chronologically():
    txns = [
        {"date": "2024-05-02", "type": "income", "amount": 100},
        {"date": "2024-03-10", "type": "expense", "amount": 40},
        {"date": "2024-05-20", "type": "expense", "amount": 25.5},
        {"date": "2024-03-11", "type": "income", "amount": 60},
    ]
    buckets = aggregate_monthly(txns, as_of=AS_OF)
    assert [b.key for b in buckets] == [(2024, 3), (2024, 5)]
    assert buckets[0].income == 60 and buckets[0].expense == 40
    assert buckets[1].income == 100 and buckets[1].expense == 25.5


def test_aggregate_orders_across_year_boundary():
    txns = [
        {"date": "2024-01-05", "type": "income", "amount": 1},
        {"date": "2023-12-05", "type": "income", "amount": 1},
        {"date": "2023-10-05", "type": "income", "amount": 1},
    ]
    buckets = aggregate_monthly(txns, as_of=date(2024, 1, 31))
    assert [b.key for b in buckets] == [(2023, 10), (2023, 12), (2024, 1)]


def test_aggregate_skips_records_outside_window_or_unreadable():
    txns = [
        {"date": "2023-11-15", "type": "income", "amount": 500},  # before cutoff
        {"date": "not-a-date", "type": "income", "amount": 10},
        {"date": "2024-04-01", "type": "income", "amount": "abc"},
        {"date": "2024-04-01", "type": "income", "amount": float("nan")},
        {"type": "income", "amount": 10},
        {"date": "2024-04-02", "type": "income", "amount": 70},
    ]
    buckets = aggregate_monthly(txns, as_of=AS_OF)
    assert len(buckets) == 1
    assert buckets[0].income == 70


def test_aggregate_skips_records_after_as_of():
    txns = [
        {"date": "2024-06-30", "type": "income", "amount": 40},
        {"date": "2024-07-01", "type": "income", "amount": 9000},
        {"date": "2025-01-10", "type": "expense", "amount": 300},
    ]
    buckets = aggregate_monthly(txns, as_of=AS_OF)
    assert [b.key for b in buckets] == [(2024, 6)]
    assert buckets[0].income == 40
    assert buckets[0].expense == 0


def test_aggregate_accepts_objects_and_datetime_values():
    txns = [
        SimpleNamespace(occurred_on=date(2024, 6, 1), type="income", amount=10),
        SimpleNamespace(date=datetime(2024, 6, 3, 12, 30), type="expense", amount=4),
    ]
    buckets = aggregate_monthly(txns, as_of=AS_OF)
    assert buckets[0].key == (2024, 6)
    assert buckets[0].income == 10
    assert buckets[0].expense == 4


def test_non_income_types_count_as_expense():
    txns = [{"date": "2024-06-01", "type": "transfer", "amount": 12}]
    buckets = aggregate_monthly(txns, as_of=AS_OF)
    assert buckets[0].expense == 12
    assert buckets[0].income == 0


def test_empty_input_yields_no_buckets():
    assert aggregate_monthly([], as_of=AS_OF) == []


def test_months_before_clamps_day():
    assert months_before(date(2024, 8, 31), 6) == date(2024, 2, 29)
    assert months_before(date(2024, 1, 15), 1) == date(2023, 12, 15)


# --- trend ---


def test_ols_slope_linear_series():
    assert ols_slope([1000, 2000, 3000]) == 1000


def test_ols_slope_constant_series_is_zero():
    assert ols_slope([250, 250, 250, 250]) == 0


def test_ols_slope_needs_two_points():
    assert ols_slope([]) == 0.0
    assert ols_slope([42]) == 0.0


def test_ols_slope_decreasing():
    assert ols_slope([30, 20, 10]) == pytest.approx(-10)


@pytest.mark.parametrize(
    "intercept,slope,count",
    [(12.5, 3.25, 2), (-40.75, 0.5, 6), (1999.99, -17.3, 12)],
)
def test_ols_slope_recovers_linear_series(intercept, slope, count):
    values = [intercept + slope * i for i in range(1, count + 1)]
    assert ols_slope(values) == pytest.approx(slope)


# --- projection ---


def test_flat_trend_projection():
    projections = project_balances(**_projection_kwargs())
    assert [(p.period, p.projected_income, p.projected_expense, p.projected_balance) for p in projections] == [
        (1, 5000, 3000, 3000),
        (2, 5000, 3000, 5000),
        (3, 5000, 3000, 7000),
    ]


def test_trend_ramps_with_period():
    projections = project_balances(**_projection_kwargs(income_trend=500, periods=2))
    # 5000 * (1 + 0.1 * 0.5 * 0.3) and 5000 * (1 + 0.1 * 1 * 0.3)
    assert projections[0].projected_income == 5075
    assert projections[1].projected_income == 5150
    assert projections[1].projected_balance == 1000 + 2075 + 2150


def test_zero_average_ignores_trend():
    projections = project_balances(**_projection_kwargs(average_income=0, income_trend=300, periods=1))
    assert projections[0].projected_income == 0
    assert projections[0].projected_balance == -2000


@pytest.mark.parametrize("periods", [3, 6, 12])
def test_zero_average_income_ignores_trend_every_period(periods):
    projections = project_balances(**_projection_kwargs(average_income=0, income_trend=300, periods=periods))
    assert [p.projected_income for p in projections] == [0] * periods
    assert [p.projected_expense for p in projections] == [3000] * periods
    assert projections[-1].projected_balance == 1000 - 3000 * periods


@pytest.mark.parametrize("periods", [3, 6, 12])
def test_zero_average_expense_ignores_trend_every_period(periods):
    projections = project_balances(**_projection_kwargs(average_expense=0, expense_trend=-250, periods=periods))
    for i, p in enumerate(projections, start=1):
        assert p.projected_expense == 0
        assert p.projected_income == 5000
        assert p.projected_balance == 1000 + 5000 * i
        assert all(math.isfinite(v) for v in (p.projected_income, p.projected_expense, p.projected_balance))


@pytest.mark.parametrize(
    "overrides",
    [
        {},
        {"income_trend": 412.37, "expense_trend": -96.11, "periods": 6},
        {"current_balance": -250.55, "income_trend": -800, "expense_trend": 333.33, "periods": 12},
    ],
)
def test_projection_is_repeatable(overrides):
    kwargs = _projection_kwargs(**overrides)
    assert project_balances(**kwargs) == project_balances(**kwargs)


@pytest.mark.parametrize(
    "overrides",
    [
        {"income_trend": 412.37, "expense_trend": -96.11, "periods": 6},
        dict(current_balance=-250.55, average_income=3210.45, income_trend=-800, expense_trend=333.33, periods=12),
        {"average_expense": 7123.9, "expense_trend": 1500, "periods": 9},
    ],
)
def test_balance_reconstructs_from_projected_flows(overrides):
    kwargs = _projection_kwargs(**overrides)
    projections = project_balances(**kwargs)
    running = kwargs["current_balance"]
    for i, p in enumerate(projections, start=1):
        running += p.projected_income - p.projected_expense
        # each rounded flow may drift by half a cent
        assert p.projected_balance == pytest.approx(running, abs=0.005 * (2 * i + 1))


def test_projection_overflow_rejected():
    with pytest.raises(InvalidInputError) as exc:
        project_balances(
            current_balance=0,
            average_income=1e-320,
            average_expense=0,
            income_trend=1e300,
            expense_trend=0,
            periods=1,
        )
    assert exc.value.field == "projected_income"


def test_projection_periods_are_one_based_and_contiguous():
    projections = project_balances(**_projection_kwargs(periods=12))
    assert [p.period for p in projections] == list(range(1, 13))


@pytest.mark.parametrize("periods", [0, -1, 2.5, True, None])
def test_invalid_period_count_rejected(periods):
    with pytest.raises(InvalidInputError) as exc:
        project_balances(**_projection_kwargs(periods=periods))
    assert exc.value.field == "periods"


@pytest.mark.parametrize(
    "field,value",
    [
        ("current_balance", float("nan")),
        ("average_income", float("inf")),
        ("average_expense", None),
        ("income_trend", "12"),
        ("expense_trend", -math.inf),
    ],
)
def test_non_finite_inputs_rejected(field, value):
    with pytest.raises(InvalidInputError) as exc:
        project_balances(**_projection_kwargs(**{field: value}))
    assert exc.value.field == field


@pytest.mark.parametrize("base", [ForecastError, ValueError])
def test_invalid_input_error_hierarchy(base):
    with pytest.raises(base):
        project_balances(**_projection_kwargs(current_balance=float("nan")))


def test_round_money_half_away_from_zero():
    assert round_money(2.675) == 2.68
    assert round_money(0.125) == 0.13
    assert round_money(-0.125) == -0.13
    assert round_money(10) == 10.0


# --- engine ---


def test_build_forecast_end_to_end():
    txns = [
        {"date": "2024-01-15", "type": "income", "amount": 1000},
        {"date": "2024-02-15", "type": "income", "amount": 2000},
        {"date": "2024-03-15", "type": "income", "amount": 3000},
    ]
    result = build_forecast(txns, as_of=date(2024, 3, 31), current_balance=6000, forecast_period=2)
    assert result.average_income == 2000
    assert result.income_trend == 1000
    assert result.expense_trend == 0
    assert result.savings_rate == 100
    assert [p.projected_income for p in result.projections] == [2150, 2300]
    assert [p.projected_balance for p in result.projections] == [8150, 10450]


def test_build_forecast_falls_back_to_trailing_totals():
    result = build_forecast(
        [],
        as_of=AS_OF,
        current_balance=100,
        forecast_period=1,
        fallback_income_total=600,
        fallback_expense_total=300,
    )
    assert result.buckets == []
    assert result.average_income == 100
    assert result.average_expense == 50
    assert result.projections[0].projected_balance == 150


def test_build_forecast_without_history_or_fallback_is_flat():
    result = build_forecast([], as_of=AS_OF, current_balance=250, forecast_period=3)
    assert [p.projected_balance for p in result.projections] == [250, 250, 250]
    assert result.savings_rate == 0


def test_forecast_to_dict_shape():
    txns = [{"date": "2024-06-01", "type": "income", "amount": 1000}, {"date": "2024-06-02", "type": "expense", "amount": 250}]
    payload = build_forecast(txns, as_of=AS_OF, current_balance=750, forecast_period=1).to_dict()
    assert payload["currentBalance"] == 750
    assert payload["averageMonthlyIncome"] == 1000
    assert payload["averageMonthlyExpense"] == 250
    assert payload["trends"] == {"incomeTrend": 0, "expenseTrend": 0, "savingsRate": 75}
    assert payload["projections"] == [
        {"period": 1, "projectedIncome": 1000, "projectedExpense": 250, "projectedBalance": 1500}
    ]
