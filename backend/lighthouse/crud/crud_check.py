"""CRUD operations for the Check model."""

from lighthouse.crud._base_organization import CRUDBaseOrganization
from lighthouse.models.check import Check


class CRUDCheck(CRUDBaseOrganization[Check]):
    """CRUD operations for the Check model."""

    pass


check = CRUDCheck(Check)
