from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from courseoverview.db.base_class import Base

# group modes
NOGROUPS = 0
SEPARATEGROUPS = 1
VISIBLEGROUPS = 2


class CourseModule(Base):
    """Placement of a forum/assign/quiz instance inside a course."""

    __tablename__ = "course_modules"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    modname = Column(String(20), nullable=False, index=True)  # "forum" | "assign" | "quiz"
    instance = Column(Integer, nullable=False, index=True)
    visible = Column(Boolean, nullable=False, default=True)
    groupmode = Column(Integer, nullable=False, default=NOGROUPS)

    course = relationship("Course", back_populates="modules")
    availability = relationship(
        "AvailabilityRule", back_populates="course_module", cascade="all, delete-orphan"
    )


class AvailabilityRule(Base):
    """
    Restriction on top of the visible flag. Supported kinds:
    - "date_from": available once now >= value
    - "date_until": available while now < value
    - "group": available to members of group `value`
    """

    __tablename__ = "availability_rules"

    id = Column(Integer, primary_key=True, index=True)
    course_module_id = Column(
        Integer, ForeignKey("course_modules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind = Column(String(20), nullable=False)
    value = Column(Integer, nullable=False)

    course_module = relationship("CourseModule", back_populates="availability")
