"""
Proofread Comparison Tests Package
==================================
Test suite for the proofread comparison engine and its HTTP surface.

Run all tests: python3 -m pytest tests/compare/ -v
Run specific: python3 -m pytest tests/compare/test_differ.py -v
"""

__version__ = "1.0.0"
