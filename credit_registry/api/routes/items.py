"""/api/items - create and read catalogue items"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from credit_registry.api.dependencies import internal_error, parse_id
from credit_registry.api.routes.schemas import ItemCreate, ItemResponse
from credit_registry.domain.exceptions import EntityNotFoundError, PersistenceError
from credit_registry.infrastructure.database.repositories import ItemRepository
from credit_registry.infrastructure.database.session import get_db
from credit_registry.infrastructure.observability.metrics import record_created

router = APIRouter()


@router.get("/items", response_model=List[ItemResponse])
def list_items(request: Request, db: Session = Depends(get_db)):
    """All items, newest first"""
    try:
        return ItemRepository(db).list()
    except PersistenceError as e:
        raise internal_error(request, "Database error", e)


@router.post("/items", response_model=ItemResponse, status_code=201)
def create_item(payload: ItemCreate, request: Request, db: Session = Depends(get_db)):
    try:
        item = ItemRepository(db).create(payload.name, payload.description)
    except PersistenceError as e:
        raise internal_error(request, "Failed to create item", e)
    record_created("item")
    return item


@router.get("/items/{item_id}", response_model=ItemResponse)
def get_item(item_id: str, request: Request, db: Session = Depends(get_db)):
    item_pk = parse_id(item_id)
    try:
        return ItemRepository(db).get(item_pk)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")
    except PersistenceError as e:
        raise internal_error(request, "Database error", e)
