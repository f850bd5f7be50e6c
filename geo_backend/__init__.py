"""
GEO Metrics Backend Package.

FastAPI service that turns LLM mention records into brand visibility
scores: the GEO score, the IGO indices and hallucination risk analyses.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, database, and dependencies
    - models: Pydantic schemas and enums
    - services: Aggregators, lexical/statistics helpers and data access
"""

__version__ = "1.0.0"
