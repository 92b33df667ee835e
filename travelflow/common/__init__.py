"""Shared HTML helpers for all Travel Flow pages."""
