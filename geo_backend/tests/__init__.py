'''
GEO Metrics Backend Test Suite

Test Modules:
-------------
- test_statistics.py: mean / std-dev / safe_ratio / round2 helpers
- test_lexical.py: word, number and proper-noun extraction
- test_geo_score.py: five-pillar GEO score and GEO CPI
  - Empty-window law, worked examples, range/monotonicity/determinism
- test_igo_metrics.py: ICE, GAP, IGO CPI, Stability, KAPI levels
  - Weekly bucketing anchored at the earliest record
- test_hallucination.py: divergence, consensus, factual flags, risk bands
- test_persistence.py: mention store and score persistence on a mock pool
- test_api.py: calculation endpoints (400 / 404 / empty / 500 paths)

Running Tests:
--------------
    pip install -e ".[test]"
    pytest -v

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

__all__ = []
