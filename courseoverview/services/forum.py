from datetime import timedelta

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from courseoverview.core.config import FORUM_OLD_POST_DAYS
from courseoverview.models.course import Course
from courseoverview.models.course_module import SEPARATEGROUPS, CourseModule
from courseoverview.models.forum import ForumDiscussion, ForumPost, ForumRead
from courseoverview.services.access import AccessProvider, Capability


def count_forum_unread_posts(
    db: Session,
    access: AccessProvider,
    cm: CourseModule,
    user_id: int,
    now: int,
) -> int:
    """Unread posts in one forum, limited to the user's groups in separate-groups mode."""
    cutoff = now - int(timedelta(days=FORUM_OLD_POST_DAYS).total_seconds())

    query = (
        db.query(func.count(ForumPost.id))
        .join(ForumDiscussion, ForumDiscussion.id == ForumPost.discussion_id)
        .outerjoin(
            ForumRead,
            and_(
                ForumRead.post_id == ForumPost.id,
                ForumRead.user_id == user_id,
            ),
        )
        .filter(
            ForumDiscussion.forum_id == cm.instance,
            ForumRead.id.is_(None),
            ForumPost.modified >= cutoff,
        )
    )

    if cm.groupmode == SEPARATEGROUPS and not access.has_capability(
        user_id, cm, Capability.ACCESS_ALL_GROUPS
    ):
        groups = access.user_group_ids(user_id, cm.course_id)
        query = query.filter(
            or_(ForumDiscussion.group_id.is_(None), ForumDiscussion.group_id.in_(groups))
        )

    return int(query.scalar() or 0)


def count_pending_forum(
    db: Session,
    access: AccessProvider,
    user_id: int,
    course: Course,
    now: int,
) -> int:
    """Number of unread forum posts in a course, aware of the user's groups."""
    total_unread = 0
    for _forum, cm in access.course_instances("forum", course.id):
        if not access.is_user_visible(cm, user_id, now):
            continue
        total_unread += count_forum_unread_posts(db, access, cm, user_id, now)
    return total_unread
