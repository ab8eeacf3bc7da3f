from tortoise import fields, models
from tortoise.validators import MinValueValidator, MaxValueValidator
import uuid


class Submission(models.Model):
    """A single survey/form response. Immutable once created."""
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    business_id = fields.CharField(max_length=64)
    franchise_id = fields.CharField(max_length=64, null=True)
    form_id = fields.CharField(max_length=64)
    rating = fields.IntField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    categories = fields.JSONField(default=list) # [{"key": ..., "score": ...}]
    comment = fields.TextField(null=True)
    staff_id = fields.CharField(max_length=64, null=True)
    device_id = fields.CharField(max_length=128, null=True)
    ip = fields.CharField(max_length=64, null=True)
    # {form_id}:{basis}:{bucket}; unique so racing duplicates fail on insert
    dedupe_key = fields.CharField(max_length=255, unique=True)
    created_by = fields.CharField(max_length=128, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "submissions"
        indexes = [
            ("business_id",),
            ("franchise_id",),
            ("form_id",),
            ("staff_id",),
            ("device_id",),
            ("business_id", "created_at"),  # Composite: paged listing per business
        ]
