import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ModelCallLog",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("run_id", models.CharField(blank=True, db_index=True, max_length=255)),
                ("session_key", models.CharField(blank=True, db_index=True, max_length=255)),
                ("provider", models.CharField(blank=True, max_length=64)),
                ("model", models.CharField(blank=True, max_length=255)),
                ("iteration", models.PositiveIntegerField(default=1)),
                ("intent", models.TextField(blank=True)),
                ("tool_call_count", models.PositiveIntegerField(default=0)),
                ("stop_reason", models.CharField(blank=True, max_length=64)),
                ("raw_output", models.TextField(blank=True)),
                ("input_tokens", models.PositiveIntegerField(blank=True, null=True)),
                ("output_tokens", models.PositiveIntegerField(blank=True, null=True)),
                ("total_tokens", models.PositiveIntegerField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Model Call Log",
                "verbose_name_plural": "Model Call Logs",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["created_at"], name="orch_calllog_created_idx"),
                    models.Index(fields=["session_key", "created_at"], name="orch_calllog_session_idx"),
                ],
            },
        ),
    ]
