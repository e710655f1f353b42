"""
API test package for the Task Hub service.

Tests use the Flask test client and cover:
- CRUD and bulk-deletion endpoints
- Input validation and identity failures
- Error response shape
"""
