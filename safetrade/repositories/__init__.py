"""
Repositories layer - parameterized SQL against the relational store.

DESIGN PRINCIPLE:
- Repositories run SQL and shape rows, nothing else
- Business rules (validation, recommendations, alert levels) live in services
- Every value reaches the database as a bound parameter
"""
