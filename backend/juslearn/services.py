"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories
and the uploads directory. Services are intentionally thin: they perform
presence checks, execute domain logic and persist aggregates via
repositories. Failures are reported with the exceptions in `errors`.
"""

import logging
import shutil
import time
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO, List, Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from . import models, repositories
from .repositories import PathId
from .errors import AuthError, ConflictError, InternalError, ValidationError

logger = logging.getLogger("juslearn.services")

DEFAULT_PASSWORD_ROUNDS = 29000


@lru_cache(maxsize=None)
def password_context(rounds: int = DEFAULT_PASSWORD_ROUNDS) -> CryptContext:
    """Return the salted, deliberately slow hashing context for `rounds`."""
    return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto", pbkdf2_sha256__default_rounds=rounds)


class AuthService:
    """Authentication related operations (register + authenticate)."""
    def __init__(self, session: Session, rounds: int = DEFAULT_PASSWORD_ROUNDS):
        self.session = session
        self.user_repo = repositories.UserRepository(session)
        self.pwd_ctx = password_context(rounds)

    def register(self, username: Optional[str], email: Optional[str], password: Optional[str]) -> models.User:
        """Create a new user with a hashed password.

        Returns the persisted `User` instance. A taken email raises
        `ConflictError` with a message that does not say which field
        collided.
        """
        if not username or not email or not password:
            raise ValidationError("Missing required fields")
        try:
            hashed = self.pwd_ctx.hash(password)
        except Exception as exc:
            logger.exception("password hashing failed")
            raise InternalError("Internal server error during hashing.") from exc
        u = models.User(username=username, email=email, password_hash=hashed)
        try:
            user = self.user_repo.create(u)
        except IntegrityError as exc:
            raise ConflictError("Email or username already in use.") from exc
        except Exception as exc:
            logger.exception("user insert failed")
            raise InternalError("Internal server error during signup.") from exc
        logger.info("registered user %s", user.id)
        return user

    def authenticate(self, email: Optional[str], password: Optional[str]) -> models.User:
        """Verify credentials and return the matching `User`.

        Unknown email and wrong password raise the same `AuthError`. A
        dummy verification runs for unknown emails so both paths cost
        about the same.
        """
        user = self.user_repo.get_by_email(email) if email else None
        if not user:
            self.pwd_ctx.dummy_verify()
            raise AuthError("Invalid credentials")
        if not password or not self.pwd_ctx.verify(password, user.password_hash):
            logger.info("failed login for user %s", user.id)
            raise AuthError("Invalid credentials")
        return user


class CatalogService:
    """Read-only access to the module/topic catalog."""
    def __init__(self, session: Session):
        self.topic_repo = repositories.TopicRepository(session)

    def list_modules(self) -> List[models.Topic]:
        """Return every topic row; callers group by `module_name` themselves."""
        return self.topic_repo.list_all()


class SubmissionService:
    """Store uploaded assignment files and record them per user/topic."""
    def __init__(self, session: Session, upload_dir: Path):
        self.session = session
        self.upload_dir = Path(upload_dir)
        self.assignment_repo = repositories.AssignmentRepository(session)

    def upload(self, user_id: PathId, topic_id: PathId, filename: Optional[str], stream: Optional[BinaryIO]) -> models.Assignment:
        """Save `stream` to the uploads directory and upsert the record.

        The row for `(user_id, topic_id)` is replaced if present. When the
        store write fails the freshly written file is removed and
        `InternalError` is raised. Files from earlier uploads are left on
        disk.
        """
        if stream is None or not filename:
            raise ValidationError("No file uploaded.")
        path = self._save(filename, stream)
        try:
            row, previous_path = self.assignment_repo.replace(user_id, topic_id, str(path))
        except Exception as exc:
            logger.exception("recording upload failed for user %s topic %s", user_id, topic_id)
            self._discard(path)
            raise InternalError("Could not record the uploaded assignment.") from exc
        if previous_path and previous_path != str(path):
            logger.debug("submission %s replaced %s (file kept on disk)", row.id, previous_path)
        logger.info("stored assignment %s for user %s topic %s", row.id, user_id, topic_id)
        return row

    def _save(self, filename: str, stream: BinaryIO) -> Path:
        # <millis>-<original name>; only the final path component is kept
        name = f"{int(time.time() * 1000)}-{Path(filename).name}"
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            path = self.upload_dir / name
            with path.open("wb") as out:
                shutil.copyfileobj(stream, out)
        except OSError as exc:
            logger.exception("writing upload %s failed", name)
            raise InternalError("Could not store the uploaded file.") from exc
        return path

    def _discard(self, path: Path):
        try:
            path.unlink()
        except OSError:
            logger.warning("could not remove orphaned upload %s", path)


class ProgressService:
    """Per-topic completion and marks for a user."""
    def __init__(self, session: Session):
        self.topic_repo = repositories.TopicRepository(session)

    def get_progress(self, user_id: PathId) -> List[dict]:
        """Return one entry per catalog topic for `user_id`.

        Topics without a submission report `completed` and `marks` as 0.
        Unknown users get the same all-zero listing.
        """
        out = []
        for topic, assignment in self.topic_repo.list_with_assignments(user_id):
            out.append({
                'topicId': topic.id,
                'module_name': topic.module_name,
                'topic_name': topic.topic_name,
                'completed': int(bool(assignment.completed)) if assignment else 0,
                'marks': (assignment.marks or 0) if assignment else 0,
            })
        return out
