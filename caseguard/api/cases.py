# caseguard/api/cases.py

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from caseguard.api.deps import ActorContext, get_actor_context, get_actor_role
from caseguard.core.db import get_db
from caseguard.core.rbac import Forbidden
from caseguard.models.case import CaseStatus
from caseguard.schemas.case import CaseCloseRequest, CaseCreate, CaseRead
from caseguard.services.case_guard import ActiveCaseExists, HostConfigurationError, InvalidCustomerReference
from caseguard.services.case_service import CaseNotFound, CaseService, CaseTransitionNotAllowed, VersionConflict


router = APIRouter()


@router.post("/cases", response_model=CaseRead, status_code=status.HTTP_201_CREATED)
def create_case(
    data: CaseCreate,
    ctx: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    service = CaseService(db)
    try:
        return service.create_case(
            actor_user_id=ctx.actor_user_id,
            role=ctx.role,
            customer=data.customer.to_ref() if data.customer else None,
            title=data.title,
            description=data.description,
        )
    except ActiveCaseExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidCustomerReference as e:
        raise HTTPException(status_code=422, detail=str(e))
    except HostConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.get("/cases", response_model=list[CaseRead])
def list_cases(
    customer_id: UUID | None = Query(None),
    case_status: CaseStatus | None = Query(None, alias="status"),
    role: str = Depends(get_actor_role),
    db: Session = Depends(get_db),
):
    try:
        return CaseService(db).list_cases(role=role, customer_id=customer_id, status=case_status)
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.get("/cases/{case_id}", response_model=CaseRead)
def get_case(case_id: UUID, role: str = Depends(get_actor_role), db: Session = Depends(get_db)):
    try:
        return CaseService(db).get_case(case_id, role=role)
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
    except CaseNotFound:
        raise HTTPException(status_code=404, detail="Case not found")


@router.post("/cases/{case_id}/resolve", response_model=CaseRead)
def resolve_case(
    case_id: UUID,
    body: CaseCloseRequest,
    ctx: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    return _close(CaseService(db).resolve_case, case_id, body, ctx)


@router.post("/cases/{case_id}/cancel", response_model=CaseRead)
def cancel_case(
    case_id: UUID,
    body: CaseCloseRequest,
    ctx: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    return _close(CaseService(db).cancel_case, case_id, body, ctx)


def _close(close, case_id: UUID, body: CaseCloseRequest, ctx: ActorContext):
    try:
        return close(
            case_id,
            actor_user_id=ctx.actor_user_id,
            role=ctx.role,
            expected_row_version=body.expected_row_version,
        )
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
    except CaseNotFound:
        raise HTTPException(status_code=404, detail="Case not found")
    except VersionConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CaseTransitionNotAllowed as e:
        raise HTTPException(status_code=422, detail=str(e))
