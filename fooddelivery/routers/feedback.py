# fooddelivery/routers/feedback.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import feedback
from ..catalog import get_restaurant_or_404
from ..db import get_db
from ..deps import require_user
from ..models import User
from ..schemas import FeedbackIn, FeedbackOut

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackOut, status_code=201)
def submit_feedback(payload: FeedbackIn, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return FeedbackOut.from_feedback(feedback.submit(db, user, payload))


@router.get("/restaurant/{restaurant_id}", response_model=List[FeedbackOut])
def restaurant_feedback(restaurant_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    return [FeedbackOut.from_feedback(f) for f in feedback.list_for_restaurant(db, restaurant_id)]
