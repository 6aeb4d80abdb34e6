"""Public newsletter subscription and contact form endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models import Contact
from app.schemas.subscribers import (
    ContactRequest,
    ContactResponse,
    ContactSubmitResponse,
    SubscribeRequest,
    SubscriberResponse,
)
from app.services.subscribers import SubscriberExistsError, subscribe

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/subscribe", response_model=SubscriberResponse, status_code=201)
def post_subscribe(
    body: SubscribeRequest,
    db: Annotated[Session, Depends(get_db)],
) -> SubscriberResponse:
    """Subscribe an email to the newsletter. A second subscription of the same email answers 409."""
    try:
        subscriber = subscribe(db, str(body.email))
    except SubscriberExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already subscribed.",
        )
    return SubscriberResponse.model_validate(subscriber)


@router.post("/contact", response_model=ContactSubmitResponse, status_code=201)
def post_contact(
    body: ContactRequest,
    db: Annotated[Session, Depends(get_db)],
) -> ContactSubmitResponse:
    contact = Contact(
        name=body.name.strip(),
        email=str(body.email),
        message=body.message.strip(),
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    logger.info("Contact message id=%s received", contact.id)
    return ContactSubmitResponse(
        message="Thank you for your message! We will get back to you soon.",
        data=ContactResponse.model_validate(contact),
    )
