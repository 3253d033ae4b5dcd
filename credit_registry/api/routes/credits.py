"""/api/credits - credit CRUD plus listings scoped to a client or a bank"""

from typing import List, Tuple
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from credit_registry.api.dependencies import internal_error, parse_id
from credit_registry.api.routes.schemas import CreditPayload, CreditResponse, MessageResponse
from credit_registry.domain.exceptions import EntityNotFoundError, PersistenceError, ValidationError
from credit_registry.domain.models import CreditStatus, CreditType
from credit_registry.domain.validation import validate_credit
from credit_registry.infrastructure.database.repositories import CreditRepository
from credit_registry.infrastructure.database.session import get_db
from credit_registry.infrastructure.observability.metrics import record_credit_created, record_validation_failure

router = APIRouter()


def _checked(payload: CreditPayload, is_create: bool) -> Tuple[CreditType, CreditStatus]:
    try:
        return validate_credit(payload, is_create=is_create)
    except ValidationError as e:
        record_validation_failure("credit")
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/credits", response_model=List[CreditResponse])
def list_credits(request: Request, db: Session = Depends(get_db)):
    try:
        return CreditRepository(db).list()
    except PersistenceError as e:
        raise internal_error(request, "Database error", e)


@router.post("/credits", response_model=CreditResponse, status_code=201)
def create_credit(payload: CreditPayload, request: Request, db: Session = Depends(get_db)):
    """
    Open a credit for an existing client and bank.

    Status may be omitted and then starts as PENDING. A client_id or
    bank_id that does not exist fails the foreign key and returns 500.
    """
    credit_type, status = _checked(payload, is_create=True)
    try:
        credit = CreditRepository(db).create(
            client_id=payload.client_id,
            bank_id=payload.bank_id,
            min_payment=payload.min_payment,
            max_payment=payload.max_payment,
            term_months=payload.term_months,
            credit_type=credit_type,
            status=status,
        )
    except PersistenceError as e:
        raise internal_error(request, "Failed to create credit", e)
    record_credit_created(credit_type.value)
    return credit


@router.get("/credits/{credit_id}", response_model=CreditResponse)
def get_credit(credit_id: str, request: Request, db: Session = Depends(get_db)):
    credit_pk = parse_id(credit_id)
    try:
        return CreditRepository(db).get(credit_pk)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Credit not found")
    except PersistenceError as e:
        raise internal_error(request, "Database error", e)


@router.put("/credits/{credit_id}", response_model=CreditResponse)
def update_credit(credit_id: str, payload: CreditPayload, request: Request, db: Session = Depends(get_db)):
    """Replace a credit; unlike create, status must be given explicitly"""
    credit_pk = parse_id(credit_id)
    credit_type, status = _checked(payload, is_create=False)
    repo = CreditRepository(db)

    try:
        repo.update(
            credit_pk,
            client_id=payload.client_id,
            bank_id=payload.bank_id,
            min_payment=payload.min_payment,
            max_payment=payload.max_payment,
            term_months=payload.term_months,
            credit_type=credit_type,
            status=status,
        )
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Credit not found")
    except PersistenceError as e:
        raise internal_error(request, "Failed to update credit", e)

    try:
        return repo.get(credit_pk)
    except (EntityNotFoundError, PersistenceError) as e:
        raise internal_error(request, "Failed to fetch updated credit", e)


@router.delete("/credits/{credit_id}", response_model=MessageResponse)
def delete_credit(credit_id: str, request: Request, db: Session = Depends(get_db)):
    credit_pk = parse_id(credit_id)
    try:
        CreditRepository(db).delete(credit_pk)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Credit not found")
    except PersistenceError as e:
        raise internal_error(request, "Failed to delete credit", e)
    return MessageResponse(message="Credit deleted successfully")


@router.get("/clients/{client_id}/credits", response_model=List[CreditResponse])
def list_client_credits(client_id: str, request: Request, db: Session = Depends(get_db)):
    """Credits held by one client; an unknown client simply has none"""
    client_pk = parse_id(client_id, detail="Invalid client ID")
    try:
        return CreditRepository(db).list_by_client(client_pk)
    except PersistenceError as e:
        raise internal_error(request, "Database error", e)


@router.get("/banks/{bank_id}/credits", response_model=List[CreditResponse])
def list_bank_credits(bank_id: str, request: Request, db: Session = Depends(get_db)):
    bank_pk = parse_id(bank_id, detail="Invalid bank ID")
    try:
        return CreditRepository(db).list_by_bank(bank_pk)
    except PersistenceError as e:
        raise internal_error(request, "Database error", e)
