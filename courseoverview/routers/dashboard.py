from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from courseoverview.core.config import DASHBOARD_PAGETYPE
from courseoverview.core.current_user import get_current_user
from courseoverview.core.deps import get_db
from courseoverview.models.user import User
from courseoverview.schemas.overview import PendingCourseSummary
from courseoverview.services.overview import before_footer, course_summaries
from courseoverview.services.rendering import PageContext

router = APIRouter()


def _footer_script(request: Request, pagetype: str, db: Session, user: User) -> Response:
    request.state.pagetype = pagetype
    page = PageContext(pagetype=pagetype, user_id=user.id)
    before_footer(page, db)
    return Response(content=page.requires.get_end_code(), media_type="application/javascript")


@router.get("/my/courseoverview/summaries", response_model=list[PendingCourseSummary])
def my_course_summaries(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return course_summaries(db, me.id)


@router.get("/my/courseoverview.js")
def my_dashboard_script(
    request: Request,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return _footer_script(request, DASHBOARD_PAGETYPE, db, me)


@router.get("/pages/{pagetype}/footer.js")
def page_footer_script(
    pagetype: str,
    request: Request,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return _footer_script(request, pagetype, db, me)
