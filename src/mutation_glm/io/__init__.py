"""Tabular input and output helpers."""
