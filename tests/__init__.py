"""
Test suite for the autobridge engine

Contains:
- tests/unit/          : Unit tests for domain models, math and the calculator
"""
