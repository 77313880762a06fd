"""
Agent orchestrator app.

Public entrypoint:

    from orchestrator import get_orchestrator_service
    service = get_orchestrator_service()
"""

from .service.orchestrator_service import get_orchestrator_service  # noqa: F401

__all__ = ["get_orchestrator_service"]
