from courseoverview.db.base_class import Base

# import models so SQLAlchemy registers them on Base.metadata
from courseoverview.models import (  # noqa: F401
    assignment,
    course,
    course_module,
    enrollment,
    forum,
    group,
    quiz,
    role,
    user,
)
