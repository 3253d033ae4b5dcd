"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class BankType(str, Enum):
    PRIVATE = "PRIVATE"
    GOVERNMENT = "GOVERNMENT"


class CreditType(str, Enum):
    AUTO = "AUTO"
    MORTGAGE = "MORTGAGE"
    COMMERCIAL = "COMMERCIAL"


class CreditStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass
class Item:
    """Catalogue item, immutable once created"""

    id: int
    name: str
    description: Optional[str]
    created_at: datetime


@dataclass
class Client:
    """Borrower registered with the service"""

    id: int
    full_name: str
    email: str
    birth_date: date
    country: str
    created_at: datetime


@dataclass
class Bank:
    """Lending institution"""

    id: int
    name: str
    type: BankType
    created_at: datetime


@dataclass
class Credit:
    """Credit line linking a client to a bank"""

    id: int
    client_id: int
    bank_id: int
    min_payment: float
    max_payment: float
    term_months: int
    credit_type: CreditType
    status: CreditStatus
    created_at: datetime
