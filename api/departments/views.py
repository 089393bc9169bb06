# api/departments/views.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import CurrentPrincipal
from core.errors import AssetServiceError, http_error
from .models import DepartmentCreate, DepartmentRead, DepartmentUpdate
from . import db_manager

router = APIRouter(prefix="/departments", tags=["departments"])


@router.get("", response_model=list[DepartmentRead], summary="List departments")
async def list_departments_endpoint(
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> list[DepartmentRead]:
    departments = await db_manager.list_departments(db)
    return [DepartmentRead.model_validate(d) for d in departments]


@router.get("/{department_id}", response_model=DepartmentRead, summary="Get department by ID")
async def get_department_endpoint(
    department_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> DepartmentRead:
    try:
        department = await db_manager.get_department_by_id(db, department_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return DepartmentRead.model_validate(department)


@router.post(
    "",
    response_model=DepartmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create department (SuperAdmin)",
)
async def create_department_endpoint(
    payload: DepartmentCreate,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> DepartmentRead:
    try:
        department = await db_manager.create_department(
            db, current_principal, **payload.model_dump()
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return DepartmentRead.model_validate(department)


@router.put("/{department_id}", response_model=DepartmentRead, summary="Update department (SuperAdmin)")
async def update_department_endpoint(
    department_id: int,
    payload: DepartmentUpdate,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> DepartmentRead:
    try:
        department = await db_manager.update_department(
            db, current_principal, department_id, **payload.model_dump()
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return DepartmentRead.model_validate(department)


@router.delete("/{department_id}", summary="Delete department (SuperAdmin)")
async def delete_department_endpoint(
    department_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> dict:
    try:
        await db_manager.delete_department(db, current_principal, department_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return {"success": True}
