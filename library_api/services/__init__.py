"""
Services Package

Business logic, kept apart from HTTP handling so it can be tested without
a client. Every service function takes the SQLAlchemy Session as its first
argument; routers pass in the per-request session.

Current services:
- books.py: Book inventory (add, list, search, update, delete)
- borrowers.py: Borrower registry
- borrowings.py: Checkout/return workflow and borrowing listings
- analytics.py: Borrowing reports exported as CSV
- pagination.py: Shared page/count query helper
- rate_limiter.py: Rate limiting with slowapi
"""
