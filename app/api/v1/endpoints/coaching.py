"""
Live coaching endpoints.

Suggestions for the next set of the workout in progress.  The first set
of each exercise also pulls in the progression and plateau analysis.
The rest endpoint sizes the break before the next set.
"""

import datetime
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.api.dependencies import get_coaching_registry, get_current_user
from app.coach.coaching import CoachingSessionRegistry
from app.coach.modifications import calculate_optimal_rest, classify_exercise_type
from app.coach.progression import compute_progression
from app.coach.readiness import compute_readiness
from app.db.session import get_db
from app.models.user import User
from app.schemas.coaching import CoachingResponse, WorkoutContext
from app.schemas.modification import ExerciseType, RestRecommendation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/suggestions", summary="Get suggestions for the current set.", response_model=CoachingResponse, )
def get_suggestions(context: WorkoutContext, db: Session = Depends(get_db), user: User = Depends(get_current_user),
                    registry: CoachingSessionRegistry = Depends(get_coaching_registry), ):
    """
    Repeated calls for the same exercise, set number and logged set return
    the cached suggestions until the session is ended or the day changes.  When ``readiness_score`` is
    omitted it is filled from today's check-in (0-10 scale).
    """
    today = datetime.date.today()
    session = registry.get(user.id, today)

    if not session.is_cached(context) and context.readiness_score is None:
        readiness = compute_readiness(db, user.id, today)
        if readiness is not None:
            context = context.model_copy(update={"readiness_score": round(readiness.overall_score / 10, 1)})

    progressions = None
    plateau = None
    if session.needs_engine_input(context):
        analysis = compute_progression(db, user.id, context.exercise_name, today)
        progressions = analysis.suggestions
        plateau = analysis.plateau

    suggestions, cached = session.suggest(context, progressions, plateau)
    logger.debug("coaching user=%s %s set %d: %d suggestions cached=%s", user.id, context.exercise_name,
                 context.set_number, len(suggestions), cached)
    return CoachingResponse(exercise_name=context.exercise_name, set_number=context.set_number,
                            suggestions=suggestions, cached=cached, )


@router.delete("/session", summary="End the current workout's coaching session.",
               status_code=status.HTTP_204_NO_CONTENT, )
def end_session(user: User = Depends(get_current_user),
                registry: CoachingSessionRegistry = Depends(get_coaching_registry), ):
    registry.end(user.id)


@router.get("/rest", summary="Recommend the rest interval before the next set.", response_model=RestRecommendation, )
def get_rest(exercise_name: str = Query(..., min_length=1, max_length=100),
             intensity: float = Query(..., gt=0.0, le=120.0, description="Working load as % of 1RM"),
             last_rpe: Optional[float] = Query(None, ge=1.0, le=10.0),
             exercise_type: Optional[ExerciseType] = Query(None, description="Inferred from the name when omitted"),
             user: User = Depends(get_current_user), ):
    kind = exercise_type or classify_exercise_type(exercise_name)
    return calculate_optimal_rest(kind, intensity, last_rpe)
