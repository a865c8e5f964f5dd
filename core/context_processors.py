"""Template context processors for dataVision."""

from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest


def app_name(request: HttpRequest) -> dict[str, str]:
    """Expose the application display name to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `app_name`.
    """

    return {"app_name": settings.DATAVISION_APP_NAME}
