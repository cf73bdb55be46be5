import bleach
from rest_framework import serializers


def clean_text(value: str) -> str:
    return bleach.clean((value or '').strip(), tags=[], strip=True)


class ClinicModelSerializer(serializers.ModelSerializer):
    """Model serializer carrying the optimistic concurrency token.

    ``row_version`` is echoed back by clients on update; it is ignored on create.
    """
    row_version = serializers.IntegerField(required=False, min_value=1)


def pk_field(queryset, label: str, *, required: bool = True, message: str | None = None):
    message = message or f'Selected {label} does not exist.'
    return serializers.PrimaryKeyRelatedField(
        queryset=queryset,
        required=required,
        allow_null=not required,
        error_messages={
            'does_not_exist': message,
            'incorrect_type': message,
            'required': f'Please select a {label}.',
            'null': f'Please select a {label}.',
        },
    )
