"""
Utility modules for water stability calculations.

- unit_conversion: mg/L as CaCO₃ ↔ mol/L ↔ eq/L, pH → hydrogen-ion activity
"""
