# tests/property/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Provides consistent test intensity across all property test modules.
Import these instead of using inline @settings(max_examples=...).

Usage:
    from tests.property.settings import STANDARD_SETTINGS

    @given(elapsed=durations)
    @STANDARD_SETTINGS
    def test_something(elapsed):
        ...

Tiers:
- DETERMINISM_SETTINGS: 500 examples - codec and duration text properties
- STANDARD_SETTINGS: 100 examples - Regular property tests
- SLOW_SETTINGS: 50 examples - tests that spin up thread pools
- QUICK_SETTINGS: 20 examples - Fast validation tests (simple rejection)
"""

from hypothesis import settings

# Display text must be a pure function of the record
DETERMINISM_SETTINGS = settings(max_examples=500)

# Standard property tests - good balance of coverage and speed
STANDARD_SETTINGS = settings(max_examples=100)

# Thread pool per example - fewer examples due to setup cost
SLOW_SETTINGS = settings(max_examples=50)

# Quick validation tests - simple input rejection
QUICK_SETTINGS = settings(max_examples=20)
