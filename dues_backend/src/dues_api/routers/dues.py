from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from ..repositories import Repository
from ..schemas import AffectedRowsOut, DueCreate, DueOut

router = APIRouter(
    prefix="/api/v1/dues",
    tags=["dues"],
)


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """
    Dependency returning the repository built by create_app.
    """
    return request.app.state.repository


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=DueOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Due",
    description="Create a new due stamped with the current time and return it.",
    responses={
        201: {"description": "Due created successfully"},
        422: {"description": "Validation error"},
    },
)
def create_due(payload: DueCreate, repo: Repository = Depends(get_repository)) -> DueOut:
    created = repo.create(payload)
    return DueOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[DueOut],
    summary="List Dues",
    description="List every due in storage order.",
)
def list_dues(repo: Repository = Depends(get_repository)) -> List[DueOut]:
    return [DueOut(**it) for it in repo.list()]


# PUBLIC_INTERFACE
@router.get(
    "/{due_id}",
    response_model=DueOut,
    summary="Get Due",
    description="Get a single due by ID.",
    responses={
        200: {"description": "Due found"},
        404: {"description": "Due not found"},
    },
)
def get_due(due_id: int, repo: Repository = Depends(get_repository)) -> DueOut:
    """
    Retrieve a single due by its ID.
    """
    item = repo.get_by_id(due_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Due not found")
    return DueOut(**item)


# PUBLIC_INTERFACE
@router.put(
    "/{due_id}",
    response_model=AffectedRowsOut,
    summary="Update Due Field",
    description=(
        "Update exactly one field of a due. The body is a JSON object with a single key, one of "
        "due_date, amount, status, due_type, receipt_number."
    ),
    responses={
        200: {"description": "Due updated"},
        400: {"description": "Payload does not name exactly one updatable field"},
        404: {"description": "Due not found"},
    },
)
def update_due(
    due_id: int,
    updates: Dict[str, Any] = Body(..., examples=[{"status": "Paid"}]),
    repo: Repository = Depends(get_repository),
) -> AffectedRowsOut:
    """
    Single-field update. InvalidUpdatePayload is turned into a 400 by the app's exception handler.
    """
    affected = repo.update_field(due_id, updates)
    if affected == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Due not found")
    return AffectedRowsOut(affected_rows=affected)


# PUBLIC_INTERFACE
@router.delete(
    "/{due_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Due",
    description="Delete a due by ID.",
    responses={
        204: {"description": "Due deleted"},
        404: {"description": "Due not found"},
    },
)
def delete_due(due_id: int, repo: Repository = Depends(get_repository)) -> None:
    """
    Delete a due. Returns 204 on success, 404 if not found.
    """
    if repo.delete(due_id) == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Due not found")
    return None
