"""
Tests for the Result Assembler and the end-to-end cashflow pipeline.

Tests cover assembly guards, full pipeline runs, the "no data yet"
result and propagation of validation and tenant-isolation errors.
"""

import pytest
from datetime import date
from decimal import Decimal

from fincast.data.categories.defaults import DefaultCategory
from fincast.forecast.assembler import assemble_dashboard
from fincast.forecast.categories import aggregate_categories
from fincast.forecast.engine import forecast_cashflow
from fincast.forecast.errors import AggregationInconsistency, ForecastValidationError
from fincast.forecast.pipeline import PipelineConfig, build_cashflow_dashboard
from fincast.forecast.trends import analyze_trends
from fincast.forecast.types import CategoryBreakdown, CategoryInfo, TransactionType

from tests.conftest import OTHER_TENANT_ID, bucket


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def six_months(make_transaction):
    """Six months of salary, rent and groceries."""
    transactions = []
    for month in range(1, 7):
        transactions.append(make_transaction(3000, date(2024, month, 25), TransactionType.INCOME, "cat_salary"))
        transactions.append(make_transaction(-1200, date(2024, month, 1), TransactionType.EXPENSE, "cat_rent"))
        transactions.append(make_transaction(-(300 + month * 10), date(2024, month, 12), TransactionType.EXPENSE, "cat_food"))
    transactions.append(make_transaction(-42, date(2024, 3, 3), TransactionType.EXPENSE, None))
    return transactions


# =============================================================================
# Unit Tests - Assembler
# =============================================================================

class TestAssembler:
    """Tests for structural assembly."""

    def test_assembles_inputs_unchanged(self, tenant_id):
        forecast = forecast_cashflow([bucket(2024, 1, 10, 5), bucket(2024, 2, 10, 5)], horizon=1)
        income = CategoryBreakdown(TransactionType.INCOME)
        expense = CategoryBreakdown(TransactionType.EXPENSE)
        trends = analyze_trends(forecast)

        dashboard = assemble_dashboard(tenant_id, forecast, income, expense, trends)

        assert dashboard.forecast is forecast
        assert dashboard.income_categories is income
        assert dashboard.expense_categories is expense
        assert dashboard.insights == ()

    def test_refuses_missing_component(self, tenant_id):
        forecast = forecast_cashflow([])

        with pytest.raises(ForecastValidationError) as exc:
            assemble_dashboard(
                tenant_id, forecast, CategoryBreakdown(TransactionType.INCOME), None, analyze_trends(forecast)
            )

        assert exc.value.details["missing"] == ["expense_categories"]

    def test_refuses_swapped_breakdowns(self, tenant_id, make_transaction):
        forecast = forecast_cashflow([])
        income, expense = aggregate_categories([make_transaction(5)], {}, tenant_id)

        with pytest.raises(ForecastValidationError):
            assemble_dashboard(tenant_id, forecast, expense, income, analyze_trends(forecast))


# =============================================================================
# Integration Tests - Pipeline
# =============================================================================

class TestPipeline:
    """End-to-end runs through the pure pipeline."""

    def test_full_run(self, tenant_id, categories, six_months):
        dashboard = build_cashflow_dashboard(tenant_id, six_months, categories, PipelineConfig(horizon=3))

        forecast = dashboard.forecast
        assert len(forecast.history) == 6
        assert len(forecast.forecast) == 3
        assert forecast.forecast[0].month == date(2024, 7, 1)
        assert 0 < forecast.confidence <= 0.95

        assert dashboard.total_income == Decimal("18000")
        assert dashboard.total_expense == sum(b.expense for b in forecast.history)
        assert [t.category_name for t in dashboard.expense_categories.totals] == [
            "Rent/Mortgage", "Groceries", "Uncategorized",
        ]
        assert dashboard.has_data

    def test_monthly_and_category_totals_agree(self, tenant_id, categories, six_months):
        dashboard = build_cashflow_dashboard(tenant_id, six_months, categories)

        history = dashboard.forecast.history
        assert sum(p.income for p in history) == dashboard.income_categories.total
        assert sum(p.expense for p in history) == dashboard.expense_categories.total

    def test_no_data_yet(self, tenant_id):
        dashboard = build_cashflow_dashboard(tenant_id, [], {})

        assert not dashboard.has_data
        assert dashboard.forecast.predictions == ()
        assert dashboard.forecast.confidence == 0
        assert dashboard.total_income == 0

    def test_dense_history(self, tenant_id, make_transaction):
        transactions = [
            make_transaction(100, date(2024, 1, 5), TransactionType.INCOME),
            make_transaction(100, date(2024, 3, 5), TransactionType.INCOME),
        ]

        dashboard = build_cashflow_dashboard(tenant_id, transactions, {}, PipelineConfig(horizon=1, dense=True))

        assert [p.key for p in dashboard.forecast.history] == ["2024-01", "2024-02", "2024-03"]

    def test_injected_defaults_reach_fallback(self, tenant_id, make_transaction):
        defaults = (DefaultCategory("Uncategorized", TransactionType.INCOME, "#123456"),)
        transactions = [make_transaction(10, type=TransactionType.INCOME)]

        dashboard = build_cashflow_dashboard(tenant_id, transactions, {}, defaults=defaults)

        assert dashboard.income_categories.totals[0].color == "#123456"

    def test_validation_error_aborts(self, tenant_id, categories, six_months, make_transaction):
        transactions = six_months + [make_transaction(1, occurred_at=None)]

        with pytest.raises(ForecastValidationError):
            build_cashflow_dashboard(tenant_id, transactions, categories)

    def test_bad_horizon_aborts(self, tenant_id, categories, six_months):
        with pytest.raises(ForecastValidationError):
            build_cashflow_dashboard(tenant_id, six_months, categories, PipelineConfig(horizon=0))

    def test_cross_tenant_category_aborts(self, tenant_id, categories, six_months, make_transaction):
        lookup = dict(categories)
        lookup["cat_theirs"] = CategoryInfo("cat_theirs", OTHER_TENANT_ID, "Theirs", TransactionType.EXPENSE)
        transactions = six_months + [make_transaction(5, category_id="cat_theirs")]

        with pytest.raises(AggregationInconsistency):
            build_cashflow_dashboard(tenant_id, transactions, lookup)

    def test_cross_tenant_transaction_aborts(self, tenant_id, six_months, make_transaction):
        transactions = six_months + [make_transaction(5, tenant_id=OTHER_TENANT_ID)]

        with pytest.raises(AggregationInconsistency):
            build_cashflow_dashboard(tenant_id, transactions, {})

    def test_repeat_runs_are_identical(self, tenant_id, categories, six_months):
        first = build_cashflow_dashboard(tenant_id, six_months, categories)
        second = build_cashflow_dashboard(tenant_id, six_months, categories)

        assert first == second

    def test_to_dict(self, tenant_id, categories, six_months):
        summary = build_cashflow_dashboard(tenant_id, six_months, categories).to_dict()

        assert summary["tenant_id"] == tenant_id
        assert summary["months_observed"] == 6
        assert summary["total_income"] == "18000"
