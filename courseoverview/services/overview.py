"""
Per-course pending items for the dashboard: unread forum posts, assignments to
submit or grade and quizzes to take or review.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from courseoverview.core.config import DASHBOARD_PAGETYPE
from courseoverview.lang import get_string
from courseoverview.models.assignment import (
    SUBMISSION_STATUS_SUBMITTED,
    Assignment,
    AssignGrade,
    AssignSubmission,
)
from courseoverview.models.course import Course
from courseoverview.models.group import GroupMember
from courseoverview.models.quiz import (
    ATTEMPT_FINISHED,
    Question,
    QuestionAttempt,
    Quiz,
    QuizAttempt,
    QuizSlot,
)
from courseoverview.schemas.overview import CourseFragment, PendingCourseSummary
from courseoverview.services.access import (
    AccessProvider,
    Archetype,
    Capability,
    SqlAccessProvider,
    question_status,
)
from courseoverview.services.forum import count_pending_forum
from courseoverview.services.rendering import PageContext, TemplateRenderer, collapse_whitespace

logger = logging.getLogger(__name__)


def current_time() -> int:
    return int(datetime.now(timezone.utc).timestamp())


def is_assignment_open(assignment: Assignment, now: int) -> bool:
    """Whether the submission window of an assignment is currently active."""
    allow_from = int(assignment.allow_submissions_from_date or 0)
    cutoff = int(assignment.cutoff_date or 0)

    if assignment.due_date:
        if cutoff:
            return allow_from <= now <= cutoff
        return allow_from <= now
    if allow_from:
        return allow_from <= now
    return True


def open_assignment_ids(assignments, now: int) -> set[int]:
    return {a.id for a in assignments if is_assignment_open(a, now)}


def is_quiz_active(quiz: Quiz, now: int) -> bool:
    time_open = int(quiz.time_open or 0)
    time_close = int(quiz.time_close or 0)
    return (
        (time_close >= now and time_open < now)
        or (time_close == 0 and time_open < now)
        or (time_close == 0 and time_open == 0)
    )


def count_student_pending_assign(
    db: Session,
    access: AccessProvider,
    course: Course,
    user_id: int,
    now: int,
) -> int:
    """Open assignments the user can submit to and has not submitted yet."""
    instances = access.course_instances("assign", course.id)
    open_ids = open_assignment_ids((a for a, _cm in instances), now)
    if not open_ids:
        return 0

    total = 0
    for assignment, cm in instances:
        if assignment.id not in open_ids:
            continue
        if not access.is_user_visible(cm, user_id, now):
            continue
        if not access.has_capability(user_id, cm, Capability.ASSIGN_SUBMIT):
            continue

        query = db.query(func.count(AssignSubmission.id)).filter(
            AssignSubmission.assignment_id == assignment.id,
            AssignSubmission.status == SUBMISSION_STATUS_SUBMITTED,
        )
        if assignment.team_submission:
            group_id = access.submission_group_id(user_id, assignment)
            query = query.filter(
                AssignSubmission.user_id == 0,
                AssignSubmission.group_id == group_id,
            )
        else:
            query = query.filter(AssignSubmission.user_id == user_id)

        if not query.scalar():
            total += 1

    return total


def unmarked_submissions(db: Session, assignment_ids) -> dict[int, dict[int, int]]:
    """
    assignment id -> user id -> submission id, for latest submitted attempts
    that still need grading.

    Team submissions (user_id = 0) are expanded to every member of the
    submitting group, each checked against their own grade.
    """
    assignment_ids = list(assignment_ids)
    if not assignment_ids:
        return {}

    member_id = func.coalesce(GroupMember.user_id, AssignSubmission.user_id)

    rows = (
        db.query(
            AssignSubmission.assignment_id.label("assignment"),
            member_id.label("userid"),
            AssignSubmission.id.label("id"),
        )
        .select_from(AssignSubmission)
        .outerjoin(
            GroupMember,
            and_(
                AssignSubmission.user_id == 0,
                GroupMember.group_id == AssignSubmission.group_id,
            ),
        )
        .outerjoin(
            AssignGrade,
            and_(
                AssignGrade.user_id == member_id,
                AssignGrade.assignment_id == AssignSubmission.assignment_id,
                AssignGrade.attempt_number == AssignSubmission.attempt_number,
            ),
        )
        .filter(
            or_(
                AssignGrade.time_modified.is_(None),
                AssignSubmission.time_modified > AssignGrade.time_modified,
                AssignGrade.grade.is_(None),
            ),
            AssignSubmission.time_modified.is_not(None),
            AssignSubmission.status == SUBMISSION_STATUS_SUBMITTED,
            AssignSubmission.latest.is_(True),
            AssignSubmission.assignment_id.in_(assignment_ids),
        )
        .all()
    )

    unmarked: dict[int, dict[int, int]] = {}
    for r in rows:
        if not r.userid:
            # default-group team submission with nobody to grade
            continue
        unmarked.setdefault(r.assignment, {})[r.userid] = r.id
    return unmarked


def grading_population(access: AccessProvider, cm, assignment: Assignment, user_id: int) -> list[int]:
    """Users a grader is responsible for on one assignment (never the grader)."""
    students = [
        u.id for u in access.enrolled_users(cm, Capability.ASSIGN_VIEW) if u.id != user_id
    ]
    if assignment.team_submission:
        group_id = access.submission_group_id(user_id, assignment)
        if group_id:
            members = set(access.group_member_ids(group_id))
            students = [s for s in students if s in members]
    return students


def count_teacher_pending_assign(
    db: Session,
    access: AccessProvider,
    course: Course,
    user_id: int,
    now: int,
) -> int:
    """Submitted, ungraded (assignment, student) pairs the user can grade."""
    instances = access.course_instances("assign", course.id)
    open_ids = open_assignment_ids((a for a, _cm in instances), now)
    if not open_ids:
        return 0

    unmarked = unmarked_submissions(db, open_ids)

    total = 0
    for assignment, cm in instances:
        if assignment.id not in open_ids:
            continue
        if not access.is_user_visible(cm, user_id, now):
            continue
        if not access.has_capability(user_id, cm, Capability.ASSIGN_GRADE):
            continue

        pending = unmarked.get(assignment.id, {})
        for student_id in grading_population(access, cm, assignment, user_id):
            if student_id in pending:
                total += 1

    return total


def user_attempts(db: Session, quiz_id: int, user_id: int) -> list[QuizAttempt]:
    """Finished, non-preview attempts of a user on a quiz."""
    return (
        db.query(QuizAttempt)
        .filter(
            QuizAttempt.quiz_id == quiz_id,
            QuizAttempt.user_id == user_id,
            QuizAttempt.state == ATTEMPT_FINISHED,
            QuizAttempt.preview.is_(False),
        )
        .order_by(QuizAttempt.attempt.asc())
        .all()
    )


def count_student_pending_quiz(
    db: Session,
    access: AccessProvider,
    course: Course,
    user_id: int,
    now: int,
) -> int:
    """Active quizzes the user has not attempted yet."""
    total = 0
    for quiz, cm in access.course_instances("quiz", course.id):
        if not is_quiz_active(quiz, now):
            continue
        if not access.is_user_visible(cm, user_id, now):
            continue
        # graders are not expected to take quizzes
        if access.has_capability(user_id, cm, Capability.QUIZ_VIEWREPORTS):
            continue
        if len(user_attempts(db, quiz.id, user_id)) == 0:
            total += 1
    return total


def quiz_has_essay(db: Session, course_id: int, quiz_id: int) -> bool:
    total = (
        db.query(func.count(Question.id))
        .join(QuizSlot, QuizSlot.question_id == Question.id)
        .join(Quiz, Quiz.id == QuizSlot.quiz_id)
        .filter(
            Quiz.course_id == course_id,
            Quiz.id == quiz_id,
            Question.qtype == "essay",
        )
        .scalar()
    )
    return int(total or 0) > 0


def is_real_question(question: Question | None) -> bool:
    """Description items occupy a slot but are not answerable."""
    return question is not None and question.qtype != "description"


def _has_attempt_requiring_grading(
    db: Session,
    access: AccessProvider,
    course: Course,
    quiz: Quiz,
) -> bool:
    slot_questions = {
        s.slot: s.question
        for s in db.query(QuizSlot).filter(QuizSlot.quiz_id == quiz.id).all()
    }
    requires_grading = get_string("requiresgrading", "question")

    for user in access.enrolled_users(course):
        if not access.has_archetype(user.id, course, Archetype.STUDENT):
            continue
        for attempt in user_attempts(db, quiz.id, user.id):
            question_attempts = (
                db.query(QuestionAttempt)
                .filter(QuestionAttempt.quiz_attempt_id == attempt.id)
                .order_by(QuestionAttempt.slot.asc())
                .all()
            )
            for qa in question_attempts:
                if not is_real_question(slot_questions.get(qa.slot)):
                    continue
                if question_status(qa.state) == requires_grading:
                    return True
    return False


def count_teacher_pending_quiz(
    db: Session,
    access: AccessProvider,
    course: Course,
    user_id: int,
    now: int,
) -> int:
    """
    Quizzes with at least one essay answer waiting for manual grading.
    Each quiz adds at most 1, however many attempts are waiting.
    """
    total = 0
    for quiz, cm in access.course_instances("quiz", course.id):
        if not access.is_user_visible(cm, user_id, now):
            continue
        if not quiz_has_essay(db, course.id, quiz.id):
            continue
        if not is_quiz_active(quiz, now):
            continue
        if not access.has_capability(user_id, cm, Capability.QUIZ_VIEWREPORTS):
            continue
        if _has_attempt_requiring_grading(db, access, course, quiz):
            total += 1
    return total


def build_course_summary(
    db: Session,
    access: AccessProvider,
    course: Course,
    user_id: int,
    now: int,
) -> PendingCourseSummary:
    values = {
        "course_id": course.id,
        "unread_forums": count_pending_forum(db, access, user_id, course, now),
    }

    if access.has_archetype(user_id, course, Archetype.STUDENT):
        values["is_student"] = True
        values["student_pending_assign"] = count_student_pending_assign(db, access, course, user_id, now)
        values["student_pending_quiz"] = count_student_pending_quiz(db, access, course, user_id, now)

    if access.has_archetype(user_id, course, Archetype.TEACHER) or access.has_archetype(
        user_id, course, Archetype.EDITINGTEACHER
    ):
        values["is_teacher"] = True
        values["teacher_pending_assign"] = count_teacher_pending_assign(db, access, course, user_id, now)
        values["teacher_pending_quiz"] = count_teacher_pending_quiz(db, access, course, user_id, now)

    summary = PendingCourseSummary(**values)
    logger.debug("course overview for user %s: %s", user_id, summary.model_dump())
    return summary


def course_summaries(db: Session, user_id: int, now: int | None = None) -> list[PendingCourseSummary]:
    """One summary per course the user is enrolled in."""
    if now is None:
        now = current_time()
    access = SqlAccessProvider(db)
    return [
        build_course_summary(db, access, course, user_id, now)
        for course in access.enrolled_courses(user_id)
    ]


def render_course_fragment(renderer: TemplateRenderer, summary: PendingCourseSummary) -> CourseFragment:
    markup = renderer.render_from_template("courseoverview.html", {"data": summary.model_dump()})
    return CourseFragment(course_id=summary.course_id, data=collapse_whitespace(markup))


def before_footer(
    page: PageContext,
    db: Session,
    renderer: TemplateRenderer | None = None,
    now: int | None = None,
) -> None:
    """
    Footer hook: on the dashboard, queue a script that decorates each course
    card with its pending-item counters.
    """
    if page.pagetype != DASHBOARD_PAGETYPE or not page.user_id:
        return

    if renderer is None:
        renderer = TemplateRenderer()

    fragments = [
        render_course_fragment(renderer, summary)
        for summary in course_summaries(db, page.user_id, now)
    ]

    javascript = renderer.render_from_template(
        "js.js", {"courses": [f.model_dump() for f in fragments]}
    )
    page.requires.js_init_code(javascript, on_dom_ready=True)

    logger.info("course overview queued for user %s (%d courses)", page.user_id, len(fragments))
