import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from courseoverview.core.deps import get_db
from courseoverview.core.security import hash_password
from courseoverview.db.base import Base
from courseoverview.main import app
from courseoverview.models.assignment import Assignment
from courseoverview.models.course import Course
from courseoverview.models.course_module import CourseModule
from courseoverview.models.enrollment import Enrollment
from courseoverview.models.forum import Forum
from courseoverview.models.group import Group, GroupMember
from courseoverview.models.quiz import Question, Quiz, QuizSlot
from courseoverview.models.role import Role, RoleAssignment, RoleCapability
from courseoverview.models.user import User

TEST_DB_FILE = "test_courseoverview.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# fixed "current time" for counters
NOW = 1_700_000_000
DAY = 86400

PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)

ROLE_CAPABILITIES = {
    "student": ["mod/assign:submit", "mod/assign:view"],
    "teacher": ["mod/assign:grade", "mod/assign:view", "mod/quiz:viewreports"],
    "editingteacher": [
        "mod/assign:grade",
        "mod/assign:view",
        "mod/quiz:viewreports",
        "moodle/site:accessallgroups",
    ],
}

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed():
    """
    Seed a clean platform for each test: one course with a student, a second
    student and an editing teacher. Returns the ids tests need.
    """
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()

        roles = {}
        for archetype, capabilities in ROLE_CAPABILITIES.items():
            role = Role(shortname=archetype, archetype=archetype)
            role.capabilities = [RoleCapability(capability=c) for c in capabilities]
            db.add(role)
            roles[archetype] = role

        student = User(email="student1@example.com", full_name="Student One", hashed_password=PASSWORD_HASH)
        student2 = User(email="student2@example.com", full_name="Student Two", hashed_password=PASSWORD_HASH)
        teacher = User(email="teacher1@example.com", full_name="Teacher One", hashed_password=PASSWORD_HASH)
        course = Course(fullname="Software Design", shortname="CS5004", visible=True)
        db.add_all([student, student2, teacher, course])
        db.commit()

        for user, archetype in ((student, "student"), (student2, "student"), (teacher, "editingteacher")):
            enrol(db, course.id, user.id, roles[archetype].id)
        db.commit()

        yield {
            "course_id": course.id,
            "student_id": student.id,
            "student2_id": student2.id,
            "teacher_id": teacher.id,
            "roles": {name: role.id for name, role in roles.items()},
        }
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def enrol(db, course_id: int, user_id: int, role_id: int) -> None:
    db.add(Enrollment(course_id=course_id, user_id=user_id, active=True))
    db.add(RoleAssignment(course_id=course_id, user_id=user_id, role_id=role_id))


def add_module(db, course_id: int, modname: str, instance_id: int, **cm_fields) -> CourseModule:
    cm = CourseModule(course_id=course_id, modname=modname, instance=instance_id, **cm_fields)
    db.add(cm)
    db.commit()
    return cm


def add_assignment(db, course_id: int, visible: bool = True, **fields):
    values = {
        "name": "HW",
        "due_date": 0,
        "cutoff_date": 0,
        "allow_submissions_from_date": 0,
        "team_submission": False,
    }
    values.update(fields)
    assignment = Assignment(course_id=course_id, **values)
    db.add(assignment)
    db.commit()
    return assignment, add_module(db, course_id, "assign", assignment.id, visible=visible)


def add_quiz(db, course_id: int, qtypes=("essay",), visible: bool = True, **fields):
    values = {"name": "Quiz", "time_open": 0, "time_close": 0}
    values.update(fields)
    quiz = Quiz(course_id=course_id, **values)
    db.add(quiz)
    db.commit()
    for number, qtype in enumerate(qtypes, start=1):
        question = Question(name=f"Q{number}", qtype=qtype)
        db.add(question)
        db.commit()
        db.add(QuizSlot(quiz_id=quiz.id, slot=number, question_id=question.id))
    db.commit()
    return quiz, add_module(db, course_id, "quiz", quiz.id, visible=visible)


def add_forum(db, course_id: int, **cm_fields):
    forum = Forum(course_id=course_id, name="News")
    db.add(forum)
    db.commit()
    return forum, add_module(db, course_id, "forum", forum.id, **cm_fields)


def add_group(db, course_id: int, *user_ids: int) -> Group:
    group = Group(course_id=course_id, name=f"Group {len(user_ids)}")
    group.members = [GroupMember(user_id=u) for u in user_ids]
    db.add(group)
    db.commit()
    return group
