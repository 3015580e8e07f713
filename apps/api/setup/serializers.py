# ===============================================================================
# SETUP WIZARD API SERIALIZERS 🧭
# ===============================================================================

from rest_framework import serializers

from apps.api.core import CamelCaseSerializer
from apps.setup.institution_templates import DEFAULT_INSTITUTION_TYPE


class SetupCompletionSerializer(CamelCaseSerializer):
    """Shape only; length, email and template checks live in SetupService.validate"""

    site_name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    site_tagline = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    admin_name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    admin_email = serializers.CharField(allow_blank=True)
    admin_password = serializers.CharField(allow_blank=True, trim_whitespace=False)
    contact_email = serializers.CharField(allow_blank=True)
    institution_type = serializers.CharField(required=False, default=DEFAULT_INSTITUTION_TYPE)
