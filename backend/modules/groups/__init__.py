"""
Groups module.

Private parent groups of a member within an organization.

Public API:
- IGroupService: Interface for group operations
- Group, GroupDetail: Group read models
- Groups exceptions
"""

from .interfaces import IGroupService
from .models import (
    AddParentRequest,
    CreateGroupRequest,
    Group,
    GroupDetail,
    GroupParent,
    UpdateGroupRequest,
)
from .exceptions import (
    DuplicateGroupNameError,
    GroupNotFoundError,
    GroupOrganizationMismatchError,
    ParentNotLinkedError,
)

__all__ = [
    # Interface
    "IGroupService",
    # Models
    "AddParentRequest",
    "CreateGroupRequest",
    "Group",
    "GroupDetail",
    "GroupParent",
    "UpdateGroupRequest",
    # Exceptions
    "DuplicateGroupNameError",
    "GroupNotFoundError",
    "GroupOrganizationMismatchError",
    "ParentNotLinkedError",
]
