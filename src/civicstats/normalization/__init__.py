"""Normalization of source headers to canonical field names."""
