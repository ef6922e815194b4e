"""Hestia API response fixtures."""
