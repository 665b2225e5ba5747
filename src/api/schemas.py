"""Request bodies for the marketplace API."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Email = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_lower=True, min_length=3, max_length=320),
]


class UserCreate(BaseModel):
    email: Email
    name: str | None = Field(default=None, max_length=200)
    photo_url: str | None = Field(default=None, max_length=1000)


class SocialLinksUpdate(BaseModel):
    facebook: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    instagram: str | None = None
    website: str | None = None


class ListingCreate(BaseModel):
    title: NonEmptyStr = Field(max_length=255)
    location: NonEmptyStr = Field(max_length=500)
    image: str | None = Field(default=None, max_length=1000)
    description: str | None = None
    min_price: Decimal = Field(ge=0)
    max_price: Decimal = Field(ge=0)
    installment_plan: Decimal | None = Field(default=None, ge=0)

    # Defaults to the caller's profile when omitted.
    agent_name: str | None = Field(default=None, max_length=200)
    agent_image: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _check_price_range(self) -> "ListingCreate":
        if self.min_price > self.max_price:
            raise ValueError("min_price cannot exceed max_price")
        return self


class ListingUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: NonEmptyStr | None = Field(default=None, max_length=255)
    location: NonEmptyStr | None = Field(default=None, max_length=500)
    image: str | None = Field(default=None, max_length=1000)
    description: str | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    installment_plan: Decimal | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _reject_cleared_required_fields(self) -> "ListingUpdate":
        cleared = [
            name
            for name in ("title", "location", "min_price", "max_price")
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price cannot exceed max_price")
        return self


class OfferCreate(BaseModel):
    property_id: NonEmptyStr
    title: NonEmptyStr
    location: NonEmptyStr
    image: NonEmptyStr
    agent_name: NonEmptyStr
    buyer_email: Email
    buyer_name: NonEmptyStr
    offer_amount: Decimal = Field(gt=0, allow_inf_nan=False)
    buying_date: NonEmptyStr


class PaymentCreate(BaseModel):
    property_id: NonEmptyStr
    amount: Decimal = Field(gt=0, allow_inf_nan=False)
    transaction_id: NonEmptyStr
    payment_method: NonEmptyStr = "card"
    email: Email | None = None


class PaymentIntentCreate(BaseModel):
    amount: Decimal = Field(gt=0, allow_inf_nan=False)
    property_id: str | None = None


class WishlistCreate(BaseModel):
    property_id: NonEmptyStr


class ReviewCreate(BaseModel):
    property_id: NonEmptyStr
    rating: int = Field(ge=1, le=5)
    comment: NonEmptyStr
    reviewer_name: str | None = Field(default=None, max_length=200)
    reviewer_image: str | None = Field(default=None, max_length=1000)
    property_title: str | None = Field(default=None, max_length=255)
    agent_name: str | None = Field(default=None, max_length=200)


class ReportCreate(BaseModel):
    property_id: NonEmptyStr
    description: NonEmptyStr
    reporter_name: str | None = Field(default=None, max_length=200)
