#!/usr/bin/env python3
"""
Test suite for InternScout.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Skip the tests that use the in-memory SQLite database
    python -m pytest tests/ -v -m "not db"

Repository and pipeline tests build their schema from the ORM models on
an in-memory SQLite engine (see conftest.py), so no external database or
LLM endpoint is needed. LLM calls are served by tests.mocks.llm_mocks.
"""
