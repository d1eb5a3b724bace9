"""
SQLite ETL Package

Modules:
    extract.py      - Downloads the source CSV file.
    load.py         - Loads the CSV file into a SQLite table.
    queries.py      - Create, read, update and delete operations on the table.
    instrument.py   - Times each step and measures its memory usage.
    run_pipeline.py - Dispatches actions and provides the command-line entry point.

Version: 1.0.0
"""
__version__ = "1.0.0"
