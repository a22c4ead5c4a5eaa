"""
RiskQuant Investment Decision Support.

Components:
- schemas: ROI, mitigation, cost/benefit and target result models
- roi: single, combined and optimal investment ROI; mitigation plan
- cost_benefit: lifecycle cost/benefit table, criterion-based selection
- targeting: effectiveness needed to reach a target risk score
"""
