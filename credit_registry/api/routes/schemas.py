"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Optional

from credit_registry.domain.models import BankType, CreditStatus, CreditType


class ItemCreate(BaseModel):
    """Request body for POST /api/items"""

    name: str
    description: Optional[str] = None


class ClientPayload(BaseModel):
    """Request body for POST and PUT /api/clients"""

    full_name: str
    email: str
    birth_date: date
    country: str


class BankPayload(BaseModel):
    """Request body for POST and PUT /api/banks; type is checked by the validation layer"""

    name: str
    type: str = ""


class CreditPayload(BaseModel):
    """Request body for POST and PUT /api/credits; enums and amounts are checked by the validation layer"""

    model_config = ConfigDict(allow_inf_nan=False)

    client_id: int
    bank_id: int
    min_payment: float = 0
    max_payment: float = 0
    term_months: int = 0
    credit_type: str = ""
    status: Optional[str] = Field(None, description="Empty or null defaults to PENDING on create only")


class ItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: str
    birth_date: date
    country: str
    created_at: datetime


class BankResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: BankType
    created_at: datetime


class CreditResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    bank_id: int
    min_payment: float
    max_payment: float
    term_months: int
    credit_type: CreditType
    status: CreditStatus
    created_at: datetime


class MessageResponse(BaseModel):
    """Confirmation body for deletes"""

    message: str


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response"""

    error: str
