from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from courseoverview.db.base_class import Base

ATTEMPT_IN_PROGRESS = "inprogress"
ATTEMPT_OVERDUE = "overdue"
ATTEMPT_FINISHED = "finished"
ATTEMPT_ABANDONED = "abandoned"


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    # unix timestamps, 0 means "not set"
    time_open = Column(Integer, nullable=False, default=0)
    time_close = Column(Integer, nullable=False, default=0)

    slots = relationship("QuizSlot", back_populates="quiz", cascade="all, delete-orphan")


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    qtype = Column(String(30), nullable=False)  # "essay", "multichoice", "description", ...


class QuizSlot(Base):
    __tablename__ = "quiz_slots"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    slot = Column(Integer, nullable=False)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint("quiz_id", "slot", name="uq_quiz_slot"),
    )

    quiz = relationship("Quiz", back_populates="slots")
    question = relationship("Question")


class QuizAttempt(Base):
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    attempt = Column(Integer, nullable=False, default=1)
    state = Column(String(16), nullable=False, default=ATTEMPT_IN_PROGRESS)
    preview = Column(Boolean, nullable=False, default=False)

    question_attempts = relationship(
        "QuestionAttempt", back_populates="quiz_attempt", cascade="all, delete-orphan"
    )


class QuestionAttempt(Base):
    """Grading state of one slot within a quiz attempt."""

    __tablename__ = "question_attempts"

    id = Column(Integer, primary_key=True, index=True)
    quiz_attempt_id = Column(
        Integer, ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    slot = Column(Integer, nullable=False)
    state = Column(String(20), nullable=False, default="todo")

    quiz_attempt = relationship("QuizAttempt", back_populates="question_attempts")
