"""/api/banks - bank CRUD"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from credit_registry.api.dependencies import internal_error, parse_id
from credit_registry.api.routes.schemas import BankPayload, BankResponse, MessageResponse
from credit_registry.domain.exceptions import EntityNotFoundError, PersistenceError, ValidationError
from credit_registry.domain.models import BankType
from credit_registry.domain.validation import validate_bank
from credit_registry.infrastructure.database.repositories import BankRepository
from credit_registry.infrastructure.database.session import get_db
from credit_registry.infrastructure.observability.metrics import record_created, record_validation_failure

router = APIRouter()


def _checked_type(payload: BankPayload) -> BankType:
    try:
        return validate_bank(payload)
    except ValidationError as e:
        record_validation_failure("bank")
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/banks", response_model=List[BankResponse])
def list_banks(request: Request, db: Session = Depends(get_db)):
    try:
        return BankRepository(db).list()
    except PersistenceError as e:
        raise internal_error(request, "Database error", e)


@router.post("/banks", response_model=BankResponse, status_code=201)
def create_bank(payload: BankPayload, request: Request, db: Session = Depends(get_db)):
    bank_type = _checked_type(payload)
    try:
        bank = BankRepository(db).create(payload.name, bank_type)
    except PersistenceError as e:
        raise internal_error(request, "Failed to create bank", e)
    record_created("bank")
    return bank


@router.get("/banks/{bank_id}", response_model=BankResponse)
def get_bank(bank_id: str, request: Request, db: Session = Depends(get_db)):
    bank_pk = parse_id(bank_id)
    try:
        return BankRepository(db).get(bank_pk)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Bank not found")
    except PersistenceError as e:
        raise internal_error(request, "Database error", e)


@router.put("/banks/{bank_id}", response_model=BankResponse)
def update_bank(bank_id: str, payload: BankPayload, request: Request, db: Session = Depends(get_db)):
    bank_pk = parse_id(bank_id)
    bank_type = _checked_type(payload)
    repo = BankRepository(db)

    try:
        repo.update(bank_pk, payload.name, bank_type)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Bank not found")
    except PersistenceError as e:
        raise internal_error(request, "Failed to update bank", e)

    try:
        return repo.get(bank_pk)
    except (EntityNotFoundError, PersistenceError) as e:
        raise internal_error(request, "Failed to fetch updated bank", e)


@router.delete("/banks/{bank_id}", response_model=MessageResponse)
def delete_bank(bank_id: str, request: Request, db: Session = Depends(get_db)):
    """Delete a bank; credits it issued are removed by the store"""
    bank_pk = parse_id(bank_id)
    try:
        BankRepository(db).delete(bank_pk)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Bank not found")
    except PersistenceError as e:
        raise internal_error(request, "Failed to delete bank", e)
    return MessageResponse(message="Bank deleted successfully")
