import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from caseguard.models.case import CaseStatus
from caseguard.models.customer import CustomerKind
from tests.factories import make_case


def test_db_unique_one_active_case_per_customer(db):
    customer_id = uuid.uuid4()

    # 1) первый active case — OK
    make_case(db, customer_id=customer_id, commit=True)

    # 2) второй active case для того же customer — должен упасть
    make_case(db, customer_id=customer_id)
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_db_unique_ignores_customer_kind(db):
    customer_id = uuid.uuid4()

    make_case(db, customer_id=customer_id, customer_kind=CustomerKind.organization, commit=True)

    make_case(db, customer_id=customer_id, customer_kind=CustomerKind.individual)
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_db_unique_allows_closed_cases_next_to_one_active(db):
    customer_id = uuid.uuid4()

    # resolved/canceled не считаются
    make_case(db, customer_id=customer_id, status=CaseStatus.resolved)
    make_case(db, customer_id=customer_id, status=CaseStatus.resolved)
    make_case(db, customer_id=customer_id, status=CaseStatus.canceled)
    make_case(db, customer_id=customer_id, status=CaseStatus.active)
    db.commit()


def test_db_unique_is_per_customer(db):
    make_case(db, customer_id=uuid.uuid4())
    make_case(db, customer_id=uuid.uuid4())
    db.commit()


def test_db_rejects_unknown_status(db):
    case = make_case(db, customer_id=uuid.uuid4())
    case.status = "open"
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
