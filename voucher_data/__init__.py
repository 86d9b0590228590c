"""Bundled voucher tables, shipped as package data."""
