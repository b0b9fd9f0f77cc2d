"""
Utilities Package

Helper functions used across the application:
- dates.py: display and form formatting for stored dates
"""
