"""Loaders turning external exports into ledger entries."""
