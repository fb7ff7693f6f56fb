#!/usr/bin/env python3
"""
Test suite for the candidate matching engine.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Skip the threaded coordinator tests
    python -m pytest tests/ -v -m "not concurrency"

    # Using unittest
    python -m unittest discover tests -v

Shared builders for candidates and requirement sets live in
tests/fixtures/builders.py.
"""
