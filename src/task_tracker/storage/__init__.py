"""
task_tracker.storage

Document content store package.

Responsibilities:
- Persist uploaded task documents outside the relational store.
"""

# Package marker.
