"""Per-path CORS policy.

``CORS_ALLOWED_ORIGINS`` restricts the seller dashboard.  The public
storefront endpoints are called from arbitrary customer browsers, so
requests under ``PUBLIC_API_PREFIX`` are enabled for every origin.
"""

from __future__ import annotations

from corsheaders.signals import check_request_enabled
from django.conf import settings
from django.dispatch import receiver
from django.http import HttpRequest


@receiver(check_request_enabled)
def allow_public_storefront(sender, request: HttpRequest, **kwargs) -> bool:
    return request.path.startswith(settings.PUBLIC_API_PREFIX)
