from typing import Any, Optional

from pydantic import BaseModel, field_validator

from nevmo.services.validation import check_amount, normalize_phone, require_text


class DonateRequest(BaseModel):
    phone: str
    amount: float
    message: Optional[str] = None

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> str:
        return normalize_phone(v)

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> float:
        return check_amount(v)


class SaveRequest(BaseModel):
    goal: str
    amount: float
    frequency: Optional[str] = None

    @field_validator("goal", mode="before")
    @classmethod
    def validate_goal(cls, v: Any) -> str:
        return require_text(v, "Goal")

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> float:
        return check_amount(v)


class WithdrawRequest(BaseModel):
    phone: str
    amount: float

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> str:
        return normalize_phone(v)

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> float:
        return check_amount(v)
