"""
Services layer - Business logic goes here.
Keep services focused on specific domains (reports, community, admin triage, auth).

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes and NOT SQL
- Services raise domain errors from safetrade.core.errors
- Routes translate those errors into HTTP responses
"""
