"""
Utilities Package

Helper functions used across the application:
- dates.py: UTC clock, calendar ranges and report date formatting
- export.py: Temporary CSV files and the download response that removes them
"""
