"""
Validation dataset registry and benchmark testing framework.

This module provides:
- Reference potable-water profiles spanning corrosive to scale-forming
- PHREEQC cross-validation of the engine's LSI (calcite SI)
- Automated reporting

phreeqpython is an optional dependency (pip install .[validation]);
import the submodules directly.
"""
