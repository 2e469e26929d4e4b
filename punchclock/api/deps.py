"""
API Dependencies
Provides authentication and authorization dependencies using ATAMS factory pattern
"""
from datetime import date
from typing import Optional

from atams.exceptions import BadRequestException
from atams.sso import create_atlas_client, create_auth_dependencies
from punchclock.core.config import settings

# Initialize Atlas SSO client using factory
atlas_client = create_atlas_client(settings)

# Create auth dependencies using factory
get_current_user, require_auth, require_min_role_level, require_role_level = create_auth_dependencies(atlas_client)

# Role levels used by the timeclock routes
WORKER_ROLE_LEVEL = 1
ADMIN_ROLE_LEVEL = 50


def parse_date_param(value: Optional[str], name: str) -> Optional[date]:
    """Parse an optional YYYY-MM-DD query parameter"""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise BadRequestException(f"Invalid {name} format. Use YYYY-MM-DD")


__all__ = [
    "atlas_client",
    "get_current_user",
    "require_auth",
    "require_min_role_level",
    "require_role_level",
    "WORKER_ROLE_LEVEL",
    "ADMIN_ROLE_LEVEL",
    "parse_date_param",
]
