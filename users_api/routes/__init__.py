# Routes package init
"""
Users API — Routes Package
===========================

Route Inventory:
    - users.py:   GET    /users          (list)
                  GET    /users/{id}     (detail)
                  POST   /users          (create → full list)
                  PUT    /users/{id}     (partial update → full list)
                  DELETE /users/{id}     (delete → remaining list)
    - health.py:  GET    /health         (store connectivity)

Routes handle HTTP concerns only; statements live in services/user_service.py.
"""
