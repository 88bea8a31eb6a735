"""Fincast - per-tenant cashflow forecasting and category aggregation."""
