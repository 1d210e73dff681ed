import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.activity import Activity, ActivityType

logger = logging.getLogger(__name__)


def log_activity(db: Session, user_id: int, action: ActivityType, file_id: Optional[int] = None) -> None:
    """
    Append one row to the activity log after the main write has committed.
    The log is advisory: failures are logged and rolled back, never raised.
    """
    log_activities(db, user_id, action, [file_id])


def log_activities(db: Session, user_id: int, action: ActivityType, file_ids: Iterable[Optional[int]]) -> None:
    try:
        for file_id in file_ids:
            db.add(Activity(user_id=user_id, file_id=file_id, action=action))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Could not record %s activity for user %s", action.value, user_id, exc_info=True)
