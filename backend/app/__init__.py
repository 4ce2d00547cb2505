"""
Tutorials API — Application Package
====================================

Layered layout:

    ┌─────────────────────────────────────┐
    │  server.py / connector.py (boot)    │  ← logging, connect with retry, uvicorn
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← CRUD rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   database.py (explicit handle)     │  ← engine, sessions, ping
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
