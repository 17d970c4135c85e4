"""
Programme Tracker - Source Package

A single-user record keeper for programme participants, budget lines
and expenses, with all state kept in a local key-value store.

DESIGN PRINCIPLES:
1. Each collection has exactly one in-memory owner (its repository)
2. Validate first, then write; never half-apply a change
3. No silent corrections
4. Store failures are reported, never fatal
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Programme Tracker Team"
