"""/api/clients - client CRUD"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from credit_registry.api.dependencies import internal_error, parse_id
from credit_registry.api.routes.schemas import ClientPayload, ClientResponse, MessageResponse
from credit_registry.domain.exceptions import EntityNotFoundError, PersistenceError
from credit_registry.infrastructure.database.repositories import ClientRepository
from credit_registry.infrastructure.database.session import get_db
from credit_registry.infrastructure.observability.metrics import record_created

router = APIRouter()


@router.post("/clients", response_model=ClientResponse, status_code=201)
def create_client(payload: ClientPayload, request: Request, db: Session = Depends(get_db)):
    """
    Register a client.

    Emails are unique at the store level; a duplicate surfaces as a 500
    like any other failed insert.
    """
    try:
        client = ClientRepository(db).create(
            full_name=payload.full_name,
            email=payload.email,
            birth_date=payload.birth_date,
            country=payload.country,
        )
    except PersistenceError as e:
        raise internal_error(request, "Failed to create client", e)
    record_created("client")
    return client


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(client_id: str, request: Request, db: Session = Depends(get_db)):
    client_pk = parse_id(client_id)
    try:
        return ClientRepository(db).get(client_pk)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Client not found")
    except PersistenceError as e:
        raise internal_error(request, "Database error", e)


@router.put("/clients/{client_id}", response_model=ClientResponse)
def update_client(client_id: str, payload: ClientPayload, request: Request, db: Session = Depends(get_db)):
    client_pk = parse_id(client_id)
    repo = ClientRepository(db)

    try:
        repo.update(
            client_pk,
            full_name=payload.full_name,
            email=payload.email,
            birth_date=payload.birth_date,
            country=payload.country,
        )
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Client not found")
    except PersistenceError as e:
        raise internal_error(request, "Failed to update client", e)

    try:
        return repo.get(client_pk)
    except (EntityNotFoundError, PersistenceError) as e:
        raise internal_error(request, "Failed to fetch updated client", e)


@router.delete("/clients/{client_id}", response_model=MessageResponse)
def delete_client(client_id: str, request: Request, db: Session = Depends(get_db)):
    """Delete a client; their credits go with them (ON DELETE CASCADE)"""
    client_pk = parse_id(client_id)
    try:
        ClientRepository(db).delete(client_pk)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Client not found")
    except PersistenceError as e:
        raise internal_error(request, "Failed to delete client", e)
    return MessageResponse(message="Client deleted successfully")
