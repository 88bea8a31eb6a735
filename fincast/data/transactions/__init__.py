"""Transactions - the tenant's normalized income/expense feed."""
