"""Shared helpers for the sqlite_etl package."""
