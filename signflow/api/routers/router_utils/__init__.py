"""
Router utility functions.

Contains helpers shared by the routers to keep endpoints thin.
"""

from signflow.api.routers.router_utils.error_handling import (
    handle_workflow_errors,
    status_code_for,
)

__all__ = [
    "handle_workflow_errors",
    "status_code_for",
]
