from django.contrib import admin

from orchestrator.models import ModelCallLog


@admin.register(ModelCallLog)
class ModelCallLogAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "session_key",
        "provider",
        "model",
        "iteration",
        "tool_call_count",
        "total_tokens",
        "created_at",
    ]
    list_filter = ["provider", "model"]
    search_fields = ["run_id", "session_key", "intent"]
    readonly_fields = [
        "id",
        "created_at",
        "run_id",
        "session_key",
        "provider",
        "model",
        "iteration",
        "intent",
        "tool_call_count",
        "stop_reason",
        "raw_output",
        "input_tokens",
        "output_tokens",
        "total_tokens",
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
