from pydantic import BaseModel, Field


class PendingCourseSummary(BaseModel):
    course_id: int
    is_student: bool = False
    is_teacher: bool = False
    unread_forums: int = Field(default=0, ge=0)
    student_pending_assign: int = Field(default=0, ge=0)
    student_pending_quiz: int = Field(default=0, ge=0)
    teacher_pending_assign: int = Field(default=0, ge=0)
    teacher_pending_quiz: int = Field(default=0, ge=0)


class CourseFragment(BaseModel):
    """Rendered one-line markup for a course, as handed to the dashboard script."""

    course_id: int
    data: str
