"""Pydantic schemas for providers."""

from typing import ClassVar

from pydantic import Field, field_validator

from backoffice.domain.entities import Provider

from .base import LocalDateTime, RecordSchema, WritePayload


class ProviderRecord(RecordSchema):
    entity_type: ClassVar[str] = "Provider"

    id: int | str
    document: str = ""
    name: str = ""
    business_name: str = ""
    contact_name: str = ""
    email: str = ""
    phone: str = ""
    mobile: str = ""
    address: str = ""
    city: str = ""
    payment_terms: str = ""
    payment_days: int | None = None
    notes: str = ""
    is_active: bool = True
    created_at: LocalDateTime | None = None

    def to_entity(self) -> Provider:
        return Provider(
            id=self.id,
            document=self.document,
            name=self.name,
            business_name=self.business_name,
            contact_name=self.contact_name,
            email=self.email,
            phone=self.phone,
            mobile=self.mobile,
            address=self.address,
            city=self.city,
            payment_terms=self.payment_terms,
            payment_days=self.payment_days,
            notes=self.notes,
            is_active=self.is_active,
            created_at=self.created_at,
        )


class ProviderCreate(WritePayload):
    document: str = Field(..., min_length=1, max_length=30)
    name: str = Field(..., min_length=1, max_length=200)
    business_name: str = ""
    contact_name: str = ""
    email: str = ""
    phone: str = ""
    mobile: str = ""
    address: str = ""
    city: str = ""
    payment_terms: str = ""
    payment_days: int | None = Field(None, ge=0)
    notes: str = ""
    is_active: bool = True

    @field_validator("document", "name", "business_name", "contact_name", "city", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()
