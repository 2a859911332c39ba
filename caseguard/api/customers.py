# caseguard/api/customers.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from caseguard.api.deps import ActorContext, get_actor_context, get_actor_role
from caseguard.core.db import get_db
from caseguard.core.rbac import Forbidden
from caseguard.schemas.customer import IndividualCreate, IndividualRead, OrganizationCreate, OrganizationRead
from caseguard.services.customer_service import CustomerService


router = APIRouter()


@router.post("/individuals", response_model=IndividualRead, status_code=status.HTTP_201_CREATED)
def create_individual(
    data: IndividualCreate,
    ctx: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    try:
        return CustomerService(db).create_individual(role=ctx.role, **data.model_dump())
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.get("/individuals", response_model=list[IndividualRead])
def list_individuals(role: str = Depends(get_actor_role), db: Session = Depends(get_db)):
    try:
        return CustomerService(db).list_individuals(role=role)
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.post("/organizations", response_model=OrganizationRead, status_code=status.HTTP_201_CREATED)
def create_organization(
    data: OrganizationCreate,
    ctx: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    try:
        return CustomerService(db).create_organization(role=ctx.role, **data.model_dump())
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/organizations", response_model=list[OrganizationRead])
def list_organizations(role: str = Depends(get_actor_role), db: Session = Depends(get_db)):
    try:
        return CustomerService(db).list_organizations(role=role)
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
