# amanah/schemas/rbac.py
import uuid

from pydantic import BaseModel, ConfigDict, Field


class PermissionSchema(BaseModel):
    """Schema representing a permission."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    resource: str
    action: str
    description: str | None


class PermissionCreateSchema(BaseModel):
    """Schema for creating a permission."""

    resource: str = Field(..., min_length=1, max_length=100)
    action: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class PermissionUpdateSchema(BaseModel):
    """Schema for updating a permission."""

    resource: str | None = Field(None, min_length=1, max_length=100)
    action: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class RoleSchema(BaseModel):
    """Schema representing a role."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None


class RoleWithPermissionsSchema(RoleSchema):
    """Schema representing a role along with its permissions."""

    permissions: list[PermissionSchema]


class RoleCreateSchema(BaseModel):
    """Schema for creating a new role."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    permission_ids: list[uuid.UUID] = []


class RoleUpdateSchema(BaseModel):
    """Schema for updating a role."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    permission_ids: list[uuid.UUID] | None = None


class ActionOptionSchema(BaseModel):
    """Catalog action as offered to the UI."""

    value: str
    label: str
    description: str


class ResourceOptionSchema(BaseModel):
    """Catalog resource as offered to the UI."""

    value: str
    label: str
    description: str
    category: str
