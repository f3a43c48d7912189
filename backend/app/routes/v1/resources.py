# backend/app/routes/v1/resources.py
"""
Learning resource routes - API v1

Endpoints:
    GET / - Resources visible to the caller, newest first
    POST / - Publish a resource (tutors and schools)
    GET /{resource_id} - Resource details
    PATCH /{resource_id} - Update a resource (creator only)
    DELETE /{resource_id} - Remove a resource (creator or admin)
"""

import asyncio
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies import get_current_user, get_resource_service
from ...core.config import settings
from ...core.enums import ResourceType
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import DeleteResponse, PaginatedResponse
from ...schemas.resource import ResourceCreate, ResourceResponse, ResourceUpdate
from ...services.resource_service import ResourceService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["resources-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=PaginatedResponse[ResourceResponse])
async def list_resources(
    q: Optional[str] = Query(None, max_length=100, description="Search text"),
    resource_type: Optional[ResourceType] = Query(None),
    subject: Optional[str] = Query(None),
    grade_level: Optional[str] = Query(None),
    mine: bool = Query(False, description="Only resources the caller created"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_user),
    service: ResourceService = Depends(get_resource_service),
) -> PaginatedResponse[ResourceResponse]:
    resources, total = await asyncio.to_thread(
        service.list_resources,
        current_user,
        q=q,
        resource_type=resource_type.value if resource_type else None,
        subject=subject,
        grade_level=grade_level,
        mine_only=mine,
        page=page,
        per_page=per_page,
    )
    items = [ResourceResponse.model_validate(r) for r in resources]
    return PaginatedResponse[ResourceResponse].build(items, total, page, per_page)


@router.post("", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    resource_data: ResourceCreate = Body(...),
    current_user: User = Depends(get_current_user),
    service: ResourceService = Depends(get_resource_service),
) -> ResourceResponse:
    try:
        resource = await asyncio.to_thread(service.create_resource, current_user, resource_data)
        return ResourceResponse.model_validate(resource)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: str,
    current_user: User = Depends(get_current_user),
    service: ResourceService = Depends(get_resource_service),
) -> ResourceResponse:
    try:
        resource = await asyncio.to_thread(service.get_resource, resource_id, current_user)
        return ResourceResponse.model_validate(resource)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: str,
    update_data: ResourceUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    service: ResourceService = Depends(get_resource_service),
) -> ResourceResponse:
    try:
        resource = await asyncio.to_thread(
            service.update_resource, resource_id, current_user, update_data
        )
        return ResourceResponse.model_validate(resource)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{resource_id}", response_model=DeleteResponse)
async def delete_resource(
    resource_id: str,
    current_user: User = Depends(get_current_user),
    service: ResourceService = Depends(get_resource_service),
) -> DeleteResponse:
    try:
        await asyncio.to_thread(service.delete_resource, resource_id, current_user)
        return DeleteResponse(message="Resource removed")
    except DomainException as e:
        handle_domain_exception(e)
