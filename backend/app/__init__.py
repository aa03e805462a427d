"""
Quizo Backend — Application Package Initializer
================================================

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │   Middleware (cross-cutting)        │  ← CORS, headers, rate limits
    ├─────────────────────────────────────┤
    │   Routes (API Layer)                │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Verifier, Repository)   │  ← One statement per operation
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (Persistence Gateway)    │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
