# caseguard/services/customer_service.py
from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from caseguard.core.rbac import ensure_allowed
from caseguard.models.customer import Individual, Organization


class CustomerService:
    def __init__(self, db: Session):
        self.db = db

    def create_individual(
        self,
        *,
        role: str,
        last_name: str,
        first_name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> Individual:
        ensure_allowed("customer.create", role)

        individual = Individual(first_name=first_name, last_name=last_name, email=email, phone=phone)
        self.db.add(individual)
        self.db.commit()
        self.db.refresh(individual)
        return individual

    def create_organization(
        self,
        *,
        role: str,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        primary_contact_id: UUID | None = None,
    ) -> Organization:
        ensure_allowed("customer.create", role)

        if primary_contact_id is not None and self.db.get(Individual, primary_contact_id) is None:
            raise ValueError(f"Primary contact not found: {primary_contact_id}")

        org = Organization(name=name, email=email, phone=phone, primary_contact_id=primary_contact_id)
        self.db.add(org)
        self.db.commit()
        self.db.refresh(org)
        return org

    def list_individuals(self, *, role: str) -> list[Individual]:
        ensure_allowed("customer.read", role)
        return list(self.db.execute(select(Individual).order_by(Individual.last_name)).scalars())

    def list_organizations(self, *, role: str) -> list[Organization]:
        ensure_allowed("customer.read", role)
        return list(self.db.execute(select(Organization).order_by(Organization.name)).scalars())
