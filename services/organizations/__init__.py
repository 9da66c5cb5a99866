"""Organizations, schools, faculties and membership."""

from .organization_service import OrganizationService, create_slug

__all__ = ["OrganizationService", "create_slug"]
