"""
Test Suite for Library API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_books.py: /book endpoints
- test_borrowers.py: /borrower endpoints
- test_borrowings.py: /borrowing endpoints and the checkout/return workflow
- test_analytics.py: /analytics CSV exports
- test_app.py: health/root endpoints, error rendering, rate limiter helpers
- test_utils.py: date helpers and temporary export files

Running Tests:
    pytest
    pytest tests/test_borrowings.py
    pytest -v
"""
