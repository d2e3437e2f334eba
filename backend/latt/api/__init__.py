"""API Layer: FastAPI routers, dependencies and global error handlers.

Invariants:
    - Routes never contain business logic (delegate to services/)
    - The user id is read from the session here and passed explicitly downward
"""
