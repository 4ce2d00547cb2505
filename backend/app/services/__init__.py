# Services package init
"""
Tutorials API — Services Layer
===============================

Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - TutorialService: create / list / get / update / delete tutorials
"""
