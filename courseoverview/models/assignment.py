from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from courseoverview.db.base_class import Base

SUBMISSION_STATUS_NEW = "new"
SUBMISSION_STATUS_DRAFT = "draft"
SUBMISSION_STATUS_SUBMITTED = "submitted"
SUBMISSION_STATUS_REOPENED = "reopened"


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    intro = Column(Text, nullable=True)

    # unix timestamps, 0 means "not set"
    due_date = Column(Integer, nullable=False, default=0)
    cutoff_date = Column(Integer, nullable=False, default=0)
    allow_submissions_from_date = Column(Integer, nullable=False, default=0)

    team_submission = Column(Boolean, nullable=False, default=False)

    submissions = relationship("AssignSubmission", back_populates="assignment", cascade="all, delete-orphan")
    grades = relationship("AssignGrade", back_populates="assignment", cascade="all, delete-orphan")


class AssignSubmission(Base):
    __tablename__ = "assign_submissions"

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)

    # team submissions are stored with user_id = 0 and the submitting group's id
    user_id = Column(Integer, nullable=False, default=0, index=True)
    group_id = Column(Integer, nullable=False, default=0)

    attempt_number = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=SUBMISSION_STATUS_NEW)
    latest = Column(Boolean, nullable=False, default=True)
    time_modified = Column(Integer, nullable=True)

    assignment = relationship("Assignment", back_populates="submissions")


class AssignGrade(Base):
    __tablename__ = "assign_grades"

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    attempt_number = Column(Integer, nullable=False, default=0)

    # Grading fields (nullable until graded)
    grade = Column(Float, nullable=True)
    time_modified = Column(Integer, nullable=True)

    assignment = relationship("Assignment", back_populates="grades")
