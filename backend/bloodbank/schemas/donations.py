"""Donation Schemas — bloods, donors, health entities, requests and blood bags.

Invariants:
    - Read views embed the related entities the service resolved explicitly
    - Quantities and dates are plain types here; their rules live in core/validators.py
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from bloodbank.core.domain_types import blood_label


# ─── Blood ───────────────────────────────────────────────────────

class BloodRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    rh: str

    @computed_field
    @property
    def label(self) -> str:
        return blood_label(self.type, self.rh)


# ─── Donor ───────────────────────────────────────────────────────

class DonorCreate(BaseModel):
    document: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    lastname: str = Field(min_length=1, max_length=100)
    birth_date: datetime
    user_id: int
    blood_id: int


class DonorUpdate(BaseModel):
    document: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=100)
    lastname: str | None = Field(None, min_length=1, max_length=100)
    birth_date: datetime | None = None
    blood_id: int | None = None


class DonorRead(BaseModel):
    id: int
    document: str
    name: str
    lastname: str
    birth_date: datetime
    user_id: int
    blood: BloodRead


# ─── Health Entity ───────────────────────────────────────────────

class HealthEntityCreate(BaseModel):
    nit: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    phone: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=255)
    institution_type: str
    user_id: int


class HealthEntityUpdate(BaseModel):
    nit: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=200)
    address: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, min_length=1, max_length=50)
    email: str | None = Field(None, min_length=3, max_length=255)
    institution_type: str | None = None


class HealthEntityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nit: str
    name: str
    address: str
    city: str
    phone: str
    email: str
    institution_type: str
    user_id: int


# ─── Request ─────────────────────────────────────────────────────

class RequestCreate(BaseModel):
    quantity_needed: int
    due_date: datetime
    blood_id: int
    health_entity_id: int


class RequestUpdate(BaseModel):
    quantity_needed: int | None = None
    due_date: datetime | None = None
    blood_id: int | None = None
    health_entity_id: int | None = None


class RequestRead(BaseModel):
    id: int
    date_created: datetime
    quantity_needed: int
    due_date: datetime
    blood: BloodRead
    health_entity: HealthEntityRead


# ─── Blood Bag ───────────────────────────────────────────────────

class BloodBagCreate(BaseModel):
    quantity: int
    donation_date: datetime | None = None
    expiration_date: datetime
    request_id: int
    blood_id: int
    donor_id: int


class BloodBagUpdate(BaseModel):
    quantity: int | None = None
    donation_date: datetime | None = None
    expiration_date: datetime | None = None
    request_id: int | None = None
    blood_id: int | None = None
    donor_id: int | None = None


class BloodBagRead(BaseModel):
    id: int
    quantity: int
    donation_date: datetime
    expiration_date: datetime
    blood: BloodRead
    donor: DonorRead
    request: RequestRead
