"""
Test suite for Knit Planner.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_schedule_engine.py -v
"""
