# fooddelivery/feedback.py
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import Conflict, Forbidden, ValidationError
from .models import Feedback, Restaurant, User
from .ordering.orders import get_order_or_404
from .schemas import FeedbackIn

logger = logging.getLogger(__name__)


def _refresh_rating(db: Session, restaurant_id: int) -> None:
    avg = db.query(func.avg(Feedback.rating)).filter(Feedback.restaurant_id == restaurant_id).scalar()
    r = db.get(Restaurant, restaurant_id)
    if r is not None:
        r.rating = round(float(avg or 0.0), 1)


def submit(db: Session, user: User, payload: FeedbackIn) -> Feedback:
    order = get_order_or_404(db, payload.order_id)
    if order.user_id != user.id:
        raise Forbidden("You can only review your own orders")
    if order.status != "delivered":
        raise ValidationError("Only delivered orders can be reviewed")

    fb = Feedback(
        order_id=order.id,
        user_id=user.id,
        restaurant_id=order.restaurant_id,
        rating=payload.rating,
        food_quality=payload.food_quality,
        delivery_time=payload.delivery_time,
        comment=payload.comment,
    )
    try:
        db.add(fb)
        db.flush()
        _refresh_rating(db, order.restaurant_id)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Feedback already submitted for this order") from e

    db.refresh(fb)
    logger.info("Feedback %s for order %s (rating %s)", fb.id, order.id, fb.rating)
    return fb


def list_for_restaurant(db: Session, restaurant_id: int) -> List[Feedback]:
    return (
        db.query(Feedback)
        .filter(Feedback.restaurant_id == restaurant_id)
        .order_by(Feedback.id.desc())
        .all()
    )
