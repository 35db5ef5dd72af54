"""
Test Fixtures and Utilities

Shared test data and fakes for the bank feed and YNAB.

All test data is synthetic and does not contain real financial information.
"""
