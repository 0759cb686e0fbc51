# amanah/models/permission.py
import uuid

from sqlalchemy import Column, String, Text, UniqueConstraint, Uuid

from amanah.models.base import Base, TimestampMixin


class Permission(Base, TimestampMixin):
    """A (resource, action) capability that roles can grant."""

    __tablename__ = "permissions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    resource = Column(String(100), nullable=False, index=True)
    action = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("resource", "action", name="_permission_resource_action_uc"),
    )

    @property
    def key(self) -> tuple[str, str]:
        return (self.resource, self.action)
