"""
API Routers Package

FastAPI routers grouping the endpoints by resource:
- books.py: /book/* (inventory)
- borrowers.py: /borrower/* (registry)
- borrowings.py: /borrowing/* (checkout/return and listings)
- analytics.py: /analytics/* (CSV exports)

Routers only translate between HTTP and the service layer: parse the
request, call one service function with the request's session, and shape
the response. Errors raised by services are rendered by the exception
handlers in main.py.
"""

from library_api.routers.analytics import router as analytics_router
from library_api.routers.books import router as books_router
from library_api.routers.borrowers import router as borrowers_router
from library_api.routers.borrowings import router as borrowings_router

__all__ = [
    "books_router",
    "borrowers_router",
    "borrowings_router",
    "analytics_router",
]
