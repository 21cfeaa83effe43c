"""
Core package for the HighwayExec progress dashboard.

Submodules provide CSV parsing, field mapping and validation, domain
normalisation, KPI aggregation, report generation and the user interface
helpers that are orchestrated by the top-level `app.py`.
"""
