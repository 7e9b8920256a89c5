from courseoverview.db.base import Base
from courseoverview.db.session import engine


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
