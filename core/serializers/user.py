from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.models import User as UserModel
from core.serializers.base import clean_text

User = get_user_model()

PASSWORD_MIN_LENGTH = 6


def validate_password_policy(value: str) -> str:
    errors = []
    if len(value) < PASSWORD_MIN_LENGTH:
        errors.append(f'The Password must be at least {PASSWORD_MIN_LENGTH} characters long.')
    if not any(c.isdigit() for c in value):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    if not any(c.islower() for c in value):
        errors.append("Passwords must have at least one lowercase ('a'-'z').")
    if not any(c.isupper() for c in value):
        errors.append("Passwords must have at least one uppercase ('A'-'Z').")
    if errors:
        raise serializers.ValidationError(errors)
    return value


class UserWriteSerializer(serializers.Serializer):
    """Create/edit form for staff accounts; the password is optional on edit."""
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField(max_length=150)
    phone_number = serializers.CharField(required=False, allow_blank=True, max_length=20)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True, trim_whitespace=False)
    confirm_password = serializers.CharField(required=False, allow_blank=True, write_only=True, trim_whitespace=False)
    role = serializers.ChoiceField(choices=UserModel.ROLE_CHOICES, error_messages={'required': 'Role is required.'})
    is_active = serializers.BooleanField(required=False)

    def validate_first_name(self, v):
        return clean_text(v)

    def validate_last_name(self, v):
        return clean_text(v)

    def validate_email(self, v):
        v = v.strip()
        qs = User.objects.filter(email__iexact=v) | User.objects.filter(username__iexact=v)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError(f"Email '{v}' is already taken.")
        return v

    def validate(self, attrs):
        password = attrs.get('password') or ''
        confirm = attrs.get('confirm_password') or ''
        if self.instance is None and not password:
            raise serializers.ValidationError({'password': ['Password is required.']})
        if password:
            try:
                validate_password_policy(password)
            except serializers.ValidationError as exc:
                raise serializers.ValidationError({'password': exc.detail})
            if password != confirm:
                raise serializers.ValidationError(
                    {'confirm_password': ['The password and confirmation password do not match.']}
                )
        else:
            attrs.pop('password', None)
        attrs.pop('confirm_password', None)
        return attrs


def serialize_user(user) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'name': user.get_full_name() or user.username,
        'phoneNumber': user.phone_number,
        'role': user.role,
        'isActive': user.is_active,
        'lastLogin': user.last_login.isoformat() if user.last_login else None,
        'dateJoined': user.date_joined.isoformat() if user.date_joined else None,
    }
