"""Database configurations for water stability tools.

This package contains YAML configuration files for:
- calibration_profiles.yaml: Named calibration constants for the stability engine
"""
