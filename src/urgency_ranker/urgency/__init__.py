"""
Urgency scoring.

Components:
- urgency_models.py: UrgencyConfig (coefficients, score tables) and TraitScore
- traits.py: the six trait evaluators and their normalization curves
- engine.py: aggregation, the URGENCY property cache and the comparator
- breakdown.py: per-trait breakdown table
"""
