# mr_core/common/lookups.py
from __future__ import annotations

from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import NotFound, ValidationError


def get_or_not_found(queryset, message: str, **filters):
    """
    Fetch one row or raise the API NotFound.
    Malformed ids (e.g. a non-UUID pk) are reported as not found too.
    """
    try:
        return queryset.get(**filters)
    except (queryset.model.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound(message)


def parse_uuid(value, field_name: str) -> UUID | None:
    """
    Optional UUID query parameter -> UUID, or a 400 naming the field.
    """
    if value in (None, ""):
        return None
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError({field_name: "Invalid UUID"})
