import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class OrchestratorConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orchestrator"
    verbose_name = "Agent Orchestrator"

    def ready(self) -> None:  # pragma: no cover - import side effects only
        # Import providers so built-in provider names are registered.
        try:
            from .core import providers  # noqa: F401
        except Exception:
            logger.error(
                "Failed to import orchestrator providers during startup. "
                "Agent runs will be unavailable until the issue is resolved.",
                exc_info=True,
            )
