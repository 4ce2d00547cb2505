"""
Tutorials API — Routes Package
===============================

Route Inventory:
    - main.py:       GET /                    (welcome message)
    - tutorials.py:  /api/tutorials           (CRUD)
    - health.py:     GET /health              (database connectivity probe)

Routes are thin: they extract request data, call a service, and return its
result. Business rules live in app/services.
"""
