from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from courseoverview.db.base_class import Base


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    shortname = Column(String(100), unique=True, nullable=False)
    # coarse category ("student", "teacher", "editingteacher", ...)
    archetype = Column(String(30), nullable=False, default="")

    capabilities = relationship(
        "RoleCapability", back_populates="role", cascade="all, delete-orphan"
    )


class RoleCapability(Base):
    __tablename__ = "role_capabilities"

    id = Column(Integer, primary_key=True, index=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    capability = Column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("role_id", "capability", name="uq_role_capability"),
    )

    role = relationship("Role", back_populates="capabilities")


class RoleAssignment(Base):
    """A role held by a user in a course context."""

    __tablename__ = "role_assignments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", "course_id", name="uq_role_assignment"),
    )

    user = relationship("User", back_populates="role_assignments")
    role = relationship("Role")
