from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courseoverview.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    full_name: Mapped[str | None] = mapped_column(String(255))
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    enrollments = relationship(
        "Enrollment", back_populates="user", cascade="all, delete-orphan"
    )

    role_assignments = relationship(
        "RoleAssignment", back_populates="user", cascade="all, delete-orphan"
    )
