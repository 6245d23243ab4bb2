"""
task_tracker.auth

Authentication/authorization package.

Responsibilities:
- Token service (JWT issue/verify) and password hashing.
- Access guard (role + ownership decisions).
- FastAPI auth dependencies (Principal, admin gate).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `guard` and `jwt` have no FastAPI imports, so they are unit-tested in isolation.
