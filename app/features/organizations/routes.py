"""
Organization feature routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Request, status

from app.core.schemas import ApiResponse
from app.features.organizations.dependencies import get_organization_service
from app.features.organizations.schemas import (
    OrganizationCreate,
    OrganizationHierarchyResponse,
    OrganizationResponse,
)
from app.features.organizations.services import OrganizationService
from app.features.permissions.dependencies import get_access_context, get_client_info
from app.features.permissions.engine import AccessContext
from app.features.users.schemas import OwnerCreate, UserResponse


router = APIRouter(tags=["organizations"])


@router.post("/", response_model=ApiResponse[OrganizationResponse], status_code=status.HTTP_201_CREATED)
async def create_organization(
    org_data: OrganizationCreate,
    request: Request,
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
):
    """Create a new organization (SystemAdmin only)."""
    organization = await service.create(ctx, org_data, get_client_info(request))
    return ApiResponse(
        data=OrganizationResponse.model_validate(organization),
        message="Organization created successfully",
    )


@router.get("/hierarchy", response_model=ApiResponse[OrganizationHierarchyResponse])
async def get_organization_hierarchy(
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
):
    """Get the caller's organization and the organizations it can reach."""
    return ApiResponse(data=await service.get_hierarchy(ctx))


@router.post("/{organization_id}/owner", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_organization_owner(
    organization_id: int,
    owner_data: OwnerCreate,
    request: Request,
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
):
    """Create an Owner user for an organization (SystemAdmin only)."""
    owner = await service.create_owner(ctx, organization_id, owner_data, get_client_info(request))
    return ApiResponse(
        data=UserResponse.model_validate(owner),
        message="Owner created successfully for organization",
    )
