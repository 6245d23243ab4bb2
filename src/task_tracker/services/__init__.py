"""
task_tracker.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Call the access guard before touching a resource.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services raise `task_tracker.errors` types only; HTTP mapping lives in `api.errors`.
