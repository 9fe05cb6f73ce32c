"""
Order API
=========

HTTP CRUD service over customers and orders.

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← body parsing, status codes
    ├─────────────────────────────────────┤
    │   Validation (declarative rules)    │  ← runs before any DB access
    ├─────────────────────────────────────┤
    │     Services (one statement each)   │
    ├─────────────────────────────────────┤
    │   Database (bounded async pool)     │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
