# tests/factories.py
from __future__ import annotations

import uuid
from typing import Any

from caseguard.models.case import Case, CaseStatus
from caseguard.models.customer import CustomerKind, Individual, Organization


def make_individual(db, *, commit: bool = True, **overrides: Any) -> Individual:
    person = Individual(
        id=overrides.pop("id", uuid.uuid4()),
        first_name=overrides.pop("first_name", "Ada"),
        last_name=overrides.pop("last_name", "Lovelace"),
        **overrides,
    )
    db.add(person)
    if commit:
        db.commit()
    return person


def make_organization(db, *, commit: bool = True, **overrides: Any) -> Organization:
    org = Organization(
        id=overrides.pop("id", uuid.uuid4()),
        name=overrides.pop("name", "Contoso Ltd"),
        **overrides,
    )
    db.add(org)
    if commit:
        db.commit()
    return org


def make_case(
    db,
    *,
    customer_id: uuid.UUID,
    customer_kind: CustomerKind = CustomerKind.organization,
    status: CaseStatus = CaseStatus.active,
    commit: bool = False,
    **overrides: Any,
) -> Case:
    """
    По умолчанию commit=False, чтобы тест сам контролировал, где ловить IntegrityError.
    """
    case = Case(
        id=overrides.pop("id", uuid.uuid4()),
        title=overrides.pop("title", "test case"),
        description=overrides.pop("description", None),
        status=status.value,
        customer_kind=customer_kind.value,
        customer_id=customer_id,
        created_by=overrides.pop("created_by", uuid.uuid4()),
        **overrides,
    )
    db.add(case)
    if commit:
        db.commit()
    return case
