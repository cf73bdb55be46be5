"""
Optimistic concurrency for clinic records.

Each versioned row carries ``row_version``.  An update is a single
conditional ``UPDATE ... WHERE id = %s AND row_version = %s`` which bumps
the version; when no row matches, either the record is gone or another
user saved it first.
"""
from __future__ import annotations

from typing import Any, Mapping, TypeVar

from django.db.models import F, Model
from django.utils import timezone

from core.exceptions import ConcurrencyConflict, RecordNotFound

M = TypeVar('M', bound=Model)


def _has_field(model, name: str) -> bool:
    return any(f.name == name for f in model._meta.concrete_fields)


def update_versioned(instance: M, changes: Mapping[str, Any], *, expected_version: int | None = None) -> M:
    model = type(instance)
    version = instance.row_version if expected_version is None else int(expected_version)
    values = dict(changes)
    values.pop('row_version', None)
    if _has_field(model, 'updated_date'):
        values.setdefault('updated_date', timezone.now())

    updated = model.objects.filter(pk=instance.pk, row_version=version).update(
        row_version=F('row_version') + 1, **values
    )
    if not updated:
        if not model.objects.filter(pk=instance.pk).exists():
            label = model._meta.verbose_name.title()
            raise RecordNotFound(f'{label} with ID {instance.pk} not found.')
        raise ConcurrencyConflict()

    for name, value in values.items():
        setattr(instance, name, value)
    instance.row_version = version + 1
    return instance


def save_serializer_update(serializer) -> Model:
    """Apply a validated update serializer through :func:`update_versioned`.

    The client echoes the ``row_version`` it loaded; without one the
    version read at the start of the request is used.
    """
    data = dict(serializer.validated_data)
    expected = data.pop('row_version', None)
    return update_versioned(serializer.instance, data, expected_version=expected)
