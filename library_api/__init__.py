"""
Library API Application Package

Backend for a small lending library: book inventory, borrower registry,
the checkout/return workflow, and CSV analytics exports.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and declarative base
- exceptions.py: Domain error taxonomy mapped to HTTP status codes
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (books, borrowers, borrowings, analytics, rate limiting)
- utils/: Helper functions (dates, validation, CSV export files)
"""

__version__ = "0.1.0"
