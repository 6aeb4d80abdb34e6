"""Newsletter subscriptions: one record per email."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Subscriber

logger = logging.getLogger(__name__)


class SubscriberExistsError(Exception):
    """Raised when the email is already subscribed. Subscribing is never an upsert."""


def subscribe(db: Session, email: str) -> Subscriber:
    normalized = email.strip().lower()
    if db.query(Subscriber).filter(Subscriber.email == normalized).first() is not None:
        raise SubscriberExistsError(normalized)
    subscriber = Subscriber(email=normalized)
    db.add(subscriber)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise SubscriberExistsError(normalized) from e
    db.refresh(subscriber)
    logger.info("New subscriber id=%s", subscriber.id)
    return subscriber
