# ===============================================================================
# AUTHENTICATION API SERIALIZERS 🔐
# ===============================================================================

from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)
