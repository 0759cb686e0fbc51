# amanah/models/role_permission.py
from sqlalchemy import Column, ForeignKey, PrimaryKeyConstraint, Uuid
from sqlalchemy.orm import relationship

from amanah.models.base import Base


class RolePermission(Base):
    """Association table mapping roles to their granted permissions."""

    __tablename__ = "role_permissions"

    role_id = Column(
        Uuid(as_uuid=True), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    )
    permission_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    )

    __table_args__ = (PrimaryKeyConstraint("role_id", "permission_id"),)

    role = relationship("Role", back_populates="permissions")
    permission = relationship("Permission")
