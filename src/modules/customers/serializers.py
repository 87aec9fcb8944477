"""Customer DRF serializers for API input/output.

HTTP-level parsing only; business validation lives in
``RegisterCustomerDTO`` and ``CustomerService``.
"""

from __future__ import annotations

from rest_framework import serializers


class RegisterCustomerSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.CharField(max_length=254)
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class CustomerIdentitySerializer(serializers.Serializer):
    """Renders ``{id, name, email}`` from a Customer or ``CustomerIdentityDTO``."""

    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    email = serializers.CharField(read_only=True)
