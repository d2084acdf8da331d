"""
Test Suite for epicalc

- Unit tests for the normal approximation, engine, policy tables and reporting
- Integration tests from raw inputs to report and server tools
"""
