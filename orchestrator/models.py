import uuid

from django.db import models


class ModelCallLog(models.Model):
    """Per-call capture record for observability. Not for persisting conversations."""

    # Identity
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    # Attribution
    run_id = models.CharField(max_length=255, blank=True, db_index=True)
    session_key = models.CharField(max_length=255, blank=True, db_index=True)
    provider = models.CharField(max_length=64, blank=True)
    model = models.CharField(max_length=255, blank=True)
    iteration = models.PositiveIntegerField(default=1)
    intent = models.TextField(blank=True)

    # Response
    tool_call_count = models.PositiveIntegerField(default=0)
    stop_reason = models.CharField(max_length=64, blank=True)
    raw_output = models.TextField(blank=True)

    # Usage
    input_tokens = models.PositiveIntegerField(null=True, blank=True)
    output_tokens = models.PositiveIntegerField(null=True, blank=True)
    total_tokens = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="orch_calllog_created_idx"),
            models.Index(fields=["session_key", "created_at"], name="orch_calllog_session_idx"),
        ]
        verbose_name = "Model Call Log"
        verbose_name_plural = "Model Call Logs"

    def __str__(self):
        return f"{self.provider}:{self.model} iter {self.iteration} @ {self.created_at}"


__all__ = ["ModelCallLog"]
