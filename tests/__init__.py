"""
Test suite for the Task Hub service.

This package contains:
- unit/: component tests for the cache, transaction log, stores and services
- integration/: HTTP tests through the Flask test client
"""
