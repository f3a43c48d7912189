# backend/app/routes/v1/children.py
"""
Children routes - API v1

Parents manage the children they book sessions for.

Endpoints:
    GET / - List the caller's children
    POST / - Add a child
    GET /{child_id} - Child details (owner parent, admin, or a tutor who teaches the child)
    PATCH /{child_id} - Update a child
    DELETE /{child_id} - Remove a child
"""

import asyncio
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ...api.dependencies import get_child_service, get_current_user
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import DeleteResponse
from ...schemas.child import ChildCreate, ChildResponse, ChildUpdate
from ...services.child_service import ChildService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["children-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=List[ChildResponse])
async def list_children(
    current_user: User = Depends(get_current_user),
    child_service: ChildService = Depends(get_child_service),
) -> List[ChildResponse]:
    try:
        children = await asyncio.to_thread(child_service.list_children, current_user)
        return [ChildResponse.model_validate(c) for c in children]
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=ChildResponse, status_code=status.HTTP_201_CREATED)
async def create_child(
    child_data: ChildCreate = Body(...),
    current_user: User = Depends(get_current_user),
    child_service: ChildService = Depends(get_child_service),
) -> ChildResponse:
    try:
        child = await asyncio.to_thread(child_service.create_child, current_user, child_data)
        return ChildResponse.model_validate(child)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{child_id}", response_model=ChildResponse)
async def get_child(
    child_id: str,
    current_user: User = Depends(get_current_user),
    child_service: ChildService = Depends(get_child_service),
) -> ChildResponse:
    try:
        child = await asyncio.to_thread(child_service.get_child, child_id, current_user)
        return ChildResponse.model_validate(child)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{child_id}", response_model=ChildResponse)
async def update_child(
    child_id: str,
    update_data: ChildUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    child_service: ChildService = Depends(get_child_service),
) -> ChildResponse:
    try:
        child = await asyncio.to_thread(
            child_service.update_child, child_id, current_user, update_data
        )
        return ChildResponse.model_validate(child)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{child_id}", response_model=DeleteResponse)
async def delete_child(
    child_id: str,
    current_user: User = Depends(get_current_user),
    child_service: ChildService = Depends(get_child_service),
) -> DeleteResponse:
    try:
        await asyncio.to_thread(child_service.delete_child, child_id, current_user)
        return DeleteResponse(message="Child removed")
    except DomainException as e:
        handle_domain_exception(e)
