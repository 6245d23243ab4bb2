"""
task_tracker.api.routers

HTTP routers, one module per resource.
"""
