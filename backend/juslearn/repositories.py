"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (users,
topics, assignments). Repositories return SQLModel objects and perform
commits/refreshes where appropriate.
"""

from typing import List, Optional, Tuple, Union
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Session, select
from . import models

# ids taken from URL paths: ints, or the raw segment when it is not numeric
PathId = Union[int, str]


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance.

        Raises `sqlalchemy.exc.IntegrityError` when the email is taken;
        the session is rolled back before the error propagates.
        """
        self.session.add(user)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return user

    def get_by_email(self, email: str) -> Optional[models.User]:
        """Return a `User` by email or `None` if not found."""
        stmt = select(models.User).where(models.User.email == email)
        return self.session.exec(stmt).first()


class TopicRepository:
    """Read access to the seeded topic catalog."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Topic]:
        stmt = select(models.Topic).order_by(models.Topic.id)
        return self.session.exec(stmt).all()

    def list_with_assignments(self, user_id: PathId) -> List[Tuple[models.Topic, Optional[models.Assignment]]]:
        """Left join every topic with `user_id`'s assignment for it.

        Topics without a submission come back paired with `None`.
        """
        stmt = (
            select(models.Topic, models.Assignment)
            .outerjoin(
                models.Assignment,
                (models.Assignment.topic_id == models.Topic.id) & (models.Assignment.user_id == user_id),
            )
            .order_by(models.Topic.id)
        )
        return self.session.exec(stmt).all()


class AssignmentRepository:
    """Replace-or-insert and lookups for `Assignment` rows."""
    def __init__(self, session: Session):
        self.session = session

    def get_for_user_topic(self, user_id: PathId, topic_id: PathId) -> Optional[models.Assignment]:
        stmt = select(models.Assignment).where(
            models.Assignment.user_id == user_id,
            models.Assignment.topic_id == topic_id
        )
        return self.session.exec(stmt).first()

    def list_for_user(self, user_id: PathId) -> List[models.Assignment]:
        stmt = select(models.Assignment).where(models.Assignment.user_id == user_id)
        return self.session.exec(stmt).all()

    def replace(self, user_id: PathId, topic_id: PathId, file_path: str) -> Tuple[models.Assignment, Optional[str]]:
        """Upsert the submission for a user/topic pair.

        An existing row keeps its id but every other column is reset:
        the new path is stored, marks go back to 0 and the row is marked
        completed. Returns the row and the file path it replaced, if any.
        """
        existing = self.get_for_user_topic(user_id, topic_id)
        previous_path = existing.file_path if existing else None
        # one statement so concurrent uploads for the same pair cannot both insert
        stmt = sqlite_insert(models.Assignment).values(
            user_id=user_id, topic_id=topic_id, file_path=file_path, marks=0, completed=True
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "topic_id"],
            set_={"file_path": file_path, "marks": 0, "completed": True},
        )
        try:
            self.session.connection().execute(stmt)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return self.get_for_user_topic(user_id, topic_id), previous_path
