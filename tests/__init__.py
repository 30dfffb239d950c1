"""
Test suite for water stability MCP server.

Organization:
- test_unit_conversion.py - mg/L as CaCO3 ↔ mol/L ↔ eq/L
- test_calibration.py - Calibration profiles and YAML loading
- test_equilibrium.py - Constants, activity coefficients, speciation, pH solver
- test_stability_engine.py - LSI, saturation pH, CCPP, equilibrium state
- test_target_solver.py - Inverse CCPP solving
- test_stability_tools.py - Tool wrappers (interpretation, sweeps)
- test_insight.py - Expert commentary collaborator
- test_server.py - FastMCP server integration
- test_phreeqc_crosscheck.py - PHREEQC cross-validation (needs phreeqpython)

Run with:
    pytest tests/
    pytest tests/ --cov=core --cov=tools --cov=utils
"""
