"""CRUD operations for the APIKey model."""

from lighthouse.crud._base_organization import CRUDBaseOrganization
from lighthouse.models.api_key import APIKey


class CRUDAPIKey(CRUDBaseOrganization[APIKey]):
    """CRUD operations for the APIKey model."""

    pass


api_key = CRUDAPIKey(APIKey)
