"""
Test Suite for ynabber

Test Structure:
- fixtures/: Synthetic data and in-process fakes for Akahu and YNAB
- unit/: Unit tests mirroring src/ package structure
- integration/: CLI and configuration tests

Test Data:
All test data uses synthetic ids and amounts. Real financial data is never
included in tests.
"""
