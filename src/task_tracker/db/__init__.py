"""
task_tracker.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, repositories and the admin bootstrap.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only the service layer and API dependencies import from here; the access guard
# and upload policy stay persistence-agnostic.
