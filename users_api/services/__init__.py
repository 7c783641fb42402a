# Services package init
"""
Users API — Services Layer
===========================

Service Inventory:
    - validation.py:    field rules and their check order for user bodies
    - user_service.py:  UserService, the statements against the Users table
"""
