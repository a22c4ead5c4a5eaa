"""
RiskQuant Simulation Engine — scenario modelling for a single risk.

Components:
- scoring: normalised 1-10 risk score and clamping helpers
- sampling: injectable random variance and order statistics
- simulation: Monte Carlo, confidence interval, what-if, sensitivity, threat level
- metrics: descriptive statistics, Value-at-Risk, Expected Shortfall
"""
