"""
Enumeration definitions for the GEO metrics backend.

All enums inherit from both `str` and `Enum` so they serialize as plain JSON
strings in Pydantic models and API responses.
"""

from enum import Enum


class LLMProvider(str, Enum):
    """
    LLM providers queried by the dispatch layer.

    Every mention record and execution belongs to exactly one of these.
    """
    CHATGPT = "chatgpt"
    GEMINI = "gemini"
    CLAUDE = "claude"
    PERPLEXITY = "perplexity"


class RiskLevel(str, Enum):
    """
    Hallucination risk bands.

    - LOW: 0-30, reliable response
    - MODERATE: 31-50, verify sources
    - HIGH: 51-70, manual review needed
    - CRITICAL: 71-100, likely hallucination
    """
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class KAPIMetric(str, Enum):
    """IGO indices that have classification thresholds."""
    ICE = "ice"
    GAP = "gap"
    CPI = "cpi"
    STABILITY = "stability"


class KAPILevel(str, Enum):
    """Qualitative level of an IGO index, from best to worst."""
    EXCELLENT = "excellent"
    GOOD = "good"
    REGULAR = "regular"
    CRITICAL = "critical"
