"""
task_tracker.api

API package for the Task Tracker service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, error translation and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to services.
