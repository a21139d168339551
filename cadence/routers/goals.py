"""
Goals router - goals and their role-tagged activity links.

POST   /goals                           - create
GET    /goals                           - list
GET    /goals/{id}                      - read with links
PATCH  /goals/{id}                      - update
DELETE /goals/{id}                      - delete with links
POST   /goals/{id}/links                - link an activity (habit or metric)
PATCH  /goals/{id}/links/{link_id}      - change weight / metric parameters
DELETE /goals/{id}/links/{link_id}      - unlink
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from cadence.db.base import get_db
from cadence.models.goal import Goal, GoalActivity
from cadence.schemas.common import ErrorResponse
from cadence.schemas.goal import (
    GoalCreate,
    GoalLinkCreate,
    GoalLinkResponse,
    GoalLinkUpdate,
    GoalResponse,
    GoalUpdate,
)
from cadence.services import goals as goal_service

router = APIRouter(prefix="/goals", tags=["goals"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Goal not found."}}


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _link_to_response(link: GoalActivity) -> GoalLinkResponse:
    return GoalLinkResponse(
        id=link.id,
        goal_id=link.goal_id,
        activity_id=link.activity_id,
        role=link.role,
        weight=link.weight,
        metric_baseline=link.metric_baseline,
        metric_target=link.metric_target,
        metric_direction=link.metric_direction,
        sort_order=link.sort_order,
    )


def _to_response(db: Session, goal: Goal) -> GoalResponse:
    return GoalResponse(
        id=goal.id,
        title=goal.title,
        deadline=str(goal.deadline) if goal.deadline else None,
        is_manually_paused=goal.is_manually_paused,
        sort_order=goal.sort_order,
        links=[_link_to_response(link) for link in goal_service.list_links(db, goal.id)],
    )


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
def create(payload: GoalCreate, db: Session = Depends(get_db)):
    goal = goal_service.create_goal(
        db,
        title=payload.title,
        deadline=payload.deadline,
        is_manually_paused=payload.is_manually_paused,
        sort_order=payload.sort_order,
    )
    return _to_response(db, goal)


@router.get("", response_model=list[GoalResponse])
def list_all(db: Session = Depends(get_db)):
    return [_to_response(db, g) for g in goal_service.list_goals(db)]


@router.get("/{goal_id}", response_model=GoalResponse, responses=_NOT_FOUND)
def read(goal_id: int, db: Session = Depends(get_db)):
    return _to_response(db, goal_service.get_goal(db, goal_id))


@router.patch("/{goal_id}", response_model=GoalResponse, responses=_NOT_FOUND)
def update(goal_id: int, payload: GoalUpdate, db: Session = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True)
    for key in ("title", "is_manually_paused", "sort_order"):
        if key in changes and changes[key] is None:
            del changes[key]
    return _to_response(db, goal_service.update_goal(db, goal_id, changes))


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
def delete(goal_id: int, db: Session = Depends(get_db)):
    goal_service.delete_goal(db, goal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

@router.post(
    "/{goal_id}/links",
    response_model=GoalLinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Duplicate or double-counted link."},
        422: {"model": ErrorResponse, "description": "Containers cannot be metric links."},
    },
)
def add_link(goal_id: int, payload: GoalLinkCreate, db: Session = Depends(get_db)):
    link = goal_service.link_activity(
        db,
        goal_id,
        payload.activity_id,
        role=payload.role,
        weight=payload.weight,
        metric_baseline=payload.metric_baseline,
        metric_target=payload.metric_target,
        metric_direction=payload.metric_direction,
        sort_order=payload.sort_order,
    )
    return _link_to_response(link)


@router.patch("/{goal_id}/links/{link_id}", response_model=GoalLinkResponse, responses=_NOT_FOUND)
def update_link(
    goal_id: int,
    link_id: int,
    payload: GoalLinkUpdate,
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True)
    for key in ("weight", "sort_order"):
        if key in changes and changes[key] is None:
            del changes[key]
    return _link_to_response(goal_service.update_link(db, goal_id, link_id, changes))


@router.delete(
    "/{goal_id}/links/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
)
def remove_link(goal_id: int, link_id: int, db: Session = Depends(get_db)):
    goal_service.unlink_activity(db, goal_id, link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
