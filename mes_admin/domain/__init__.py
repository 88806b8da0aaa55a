"""Lifecycle rules shared by the catalog entities.

Services apply these rules before writing; repositories use them to build
their "live row" filters.
"""
