from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models

from libs.idgen import generate_id


class SnowflakePrimaryKeyModel(models.Model):
    id = models.BigIntegerField(primary_key=True, default=generate_id, editable=False)

    class Meta:
        abstract = True


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class BaseModel(SnowflakePrimaryKeyModel, TimeStampedModel):
    class Meta:
        abstract = True


class AppendOnlyModel(BaseModel):
    """
    Rows are written once and never changed or removed through the ORM.

    Queryset-level ``update()``/``delete()`` bypass these hooks; services must not use them.
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:  # type: ignore[override]
        if not self._state.adding:
            raise ValidationError(f"{type(self).__name__} rows are immutable once created.")
        super().save(*args, **kwargs)

    def delete(self, using=None, keep_parents=False):  # type: ignore[override]
        raise ValidationError(f"{type(self).__name__} rows are immutable; deletion is not allowed.")
