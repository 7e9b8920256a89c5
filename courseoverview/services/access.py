"""
Read-only adapter over the platform schema.

Everything the overview needs to know about roles, capabilities, enrolments,
groups and module availability goes through `AccessProvider`, so the counting
code never builds permission queries itself.
"""
from enum import Enum
from typing import Protocol, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from courseoverview.lang import get_string
from courseoverview.models.assignment import Assignment
from courseoverview.models.course import Course
from courseoverview.models.course_module import AvailabilityRule, CourseModule
from courseoverview.models.enrollment import Enrollment
from courseoverview.models.forum import Forum
from courseoverview.models.group import Group, GroupMember
from courseoverview.models.quiz import Quiz
from courseoverview.models.role import Role, RoleAssignment, RoleCapability
from courseoverview.models.user import User


class Archetype(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    EDITINGTEACHER = "editingteacher"
    MANAGER = "manager"
    GUEST = "guest"


class Capability(str, Enum):
    ASSIGN_SUBMIT = "mod/assign:submit"
    ASSIGN_GRADE = "mod/assign:grade"
    ASSIGN_VIEW = "mod/assign:view"
    QUIZ_VIEWREPORTS = "mod/quiz:viewreports"
    ACCESS_ALL_GROUPS = "moodle/site:accessallgroups"


# question attempt state -> string identifier in the "question" component
QUESTION_STATE_STRINGS = {
    "todo": "notyetanswered",
    "complete": "answersaved",
    "needsgrading": "requiresgrading",
    "gradedright": "correct",
    "gradedwrong": "incorrect",
    "gradedpartial": "partiallycorrect",
    "gaveup": "notanswered",
}

MODULE_MODELS = {
    "forum": Forum,
    "assign": Assignment,
    "quiz": Quiz,
}

# A capability/role context: a course, or a module inside one.
Context = Union[Course, CourseModule]


def context_course_id(context: Context) -> int:
    if isinstance(context, CourseModule):
        return context.course_id
    return context.id


def question_status(state: str) -> str:
    """Localized status summary for a question attempt state."""
    return get_string(QUESTION_STATE_STRINGS[state], "question")


class AccessProvider(Protocol):
    def has_capability(self, user_id: int, context: Context, capability: Capability) -> bool: ...

    def has_archetype(self, user_id: int, context: Context, archetype: Archetype) -> bool: ...

    def enrolled_courses(self, user_id: int) -> list[Course]: ...

    def enrolled_users(self, context: Context, capability: Capability | None = None) -> list[User]: ...

    def user_group_ids(self, user_id: int, course_id: int) -> list[int]: ...

    def group_member_ids(self, group_id: int) -> list[int]: ...

    def submission_group_id(self, user_id: int, assignment: Assignment) -> int: ...

    def course_instances(self, modname: str, course_id: int) -> list[tuple]: ...

    def is_user_visible(self, cm: CourseModule, user_id: int, now: int) -> bool: ...


class SqlAccessProvider:
    def __init__(self, db: Session):
        self.db = db

    # roles & capabilities

    def get_user_roles(self, user_id: int, context: Context) -> list[Role]:
        return (
            self.db.query(Role)
            .join(RoleAssignment, RoleAssignment.role_id == Role.id)
            .filter(
                RoleAssignment.user_id == user_id,
                RoleAssignment.course_id == context_course_id(context),
            )
            .order_by(Role.id.asc())
            .all()
        )

    def has_archetype(self, user_id: int, context: Context, archetype: Archetype) -> bool:
        for role in self.get_user_roles(user_id, context):
            if role.archetype == Archetype(archetype).value:
                return True
        return False

    def has_capability(self, user_id: int, context: Context, capability: Capability) -> bool:
        return (
            self.db.query(RoleCapability.id)
            .join(RoleAssignment, RoleAssignment.role_id == RoleCapability.role_id)
            .filter(
                RoleAssignment.user_id == user_id,
                RoleAssignment.course_id == context_course_id(context),
                RoleCapability.capability == Capability(capability).value,
            )
            .first()
            is not None
        )

    # enrolments

    def enrolled_courses(self, user_id: int) -> list[Course]:
        return (
            self.db.query(Course)
            .join(Enrollment, Enrollment.course_id == Course.id)
            .filter(Enrollment.user_id == user_id, Enrollment.active.is_(True))
            .order_by(Course.visible.desc(), Course.id.asc())
            .all()
        )

    def enrolled_users(self, context: Context, capability: Capability | None = None) -> list[User]:
        """Active participants of the context's course, optionally limited to a capability."""
        query = (
            self.db.query(User)
            .join(Enrollment, Enrollment.user_id == User.id)
            .filter(
                Enrollment.course_id == context_course_id(context),
                Enrollment.active.is_(True),
            )
        )
        if capability is not None:
            capable = (
                select(RoleAssignment.user_id)
                .join(RoleCapability, RoleCapability.role_id == RoleAssignment.role_id)
                .where(
                    RoleAssignment.course_id == context_course_id(context),
                    RoleCapability.capability == Capability(capability).value,
                )
            )
            query = query.filter(User.id.in_(capable))
        return query.order_by(User.id.asc()).all()

    # groups

    def user_group_ids(self, user_id: int, course_id: int) -> list[int]:
        rows = (
            self.db.query(Group.id)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .filter(Group.course_id == course_id, GroupMember.user_id == user_id)
            .order_by(Group.id.asc())
            .all()
        )
        return [r.id for r in rows]

    def group_member_ids(self, group_id: int) -> list[int]:
        rows = (
            self.db.query(GroupMember.user_id)
            .filter(GroupMember.group_id == group_id)
            .order_by(GroupMember.user_id.asc())
            .all()
        )
        return [r.user_id for r in rows]

    def submission_group_id(self, user_id: int, assignment: Assignment) -> int:
        """
        Group a user submits with on a team assignment.
        Returns 0 (the default group) when the user is in no group or in several.
        """
        groups = self.user_group_ids(user_id, assignment.course_id)
        if len(groups) == 1:
            return groups[0]
        return 0

    # course modules

    def course_instances(self, modname: str, course_id: int) -> list[tuple]:
        """(instance, course module) pairs of one module type, in course order."""
        model = MODULE_MODELS[modname]
        return (
            self.db.query(model, CourseModule)
            .join(
                CourseModule,
                (CourseModule.instance == model.id) & (CourseModule.modname == modname),
            )
            .filter(CourseModule.course_id == course_id, model.course_id == course_id)
            .order_by(CourseModule.id.asc())
            .all()
        )

    def is_user_visible(self, cm: CourseModule, user_id: int, now: int) -> bool:
        """Visible flag plus every availability rule attached to the module."""
        if not cm.visible:
            return False

        rules = (
            self.db.query(AvailabilityRule)
            .filter(AvailabilityRule.course_module_id == cm.id)
            .all()
        )
        groups = None
        for rule in rules:
            if rule.kind == "date_from":
                if now < rule.value:
                    return False
            elif rule.kind == "date_until":
                if now >= rule.value:
                    return False
            elif rule.kind == "group":
                if groups is None:
                    groups = self.user_group_ids(user_id, cm.course_id)
                if rule.value not in groups:
                    return False
            else:
                raise ValueError(f"Unknown availability rule kind: {rule.kind}")
        return True
