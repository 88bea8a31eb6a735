"""Forecast module - monthly aggregation, category totals and cashflow forecasting."""
