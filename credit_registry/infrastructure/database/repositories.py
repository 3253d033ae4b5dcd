"""Data access layer for registry entities"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from credit_registry.domain.exceptions import DomainException, EntityNotFoundError, PersistenceError
from credit_registry.domain.models import Bank, BankType, Client, Credit, CreditStatus, CreditType, Item
from credit_registry.infrastructure.database.models import BankRow, ClientRow, CreditRow, ItemRow

logger = logging.getLogger(__name__)


class _Repository:
    """Shared transaction and decoding plumbing; each public call is its own transaction"""

    row_model: Any = None
    entity_name: str = ""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _transaction(self):
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"{self.entity_name} statement failed: {e}") from e
        except DomainException:
            self.db.rollback()
            raise

    def _to_entity(self, row):
        raise NotImplementedError

    def _newest_first(self) -> Query:
        return self.db.query(self.row_model).order_by(
            self.row_model.created_at.desc(), self.row_model.id.desc()
        )

    def _decode_all(self, rows: Iterable) -> List:
        """Decode rows, skipping any that cannot be mapped to an entity"""
        entities = []
        for row in rows:
            try:
                entities.append(self._to_entity(row))
            except (ValueError, TypeError) as e:
                logger.warning(
                    f"Skipping unreadable {self.entity_name} row",
                    extra={"row_id": row.id, "error": str(e)},
                )
        return entities

    def _list(self, query: Query) -> List:
        with self._transaction():
            entities = self._decode_all(query.all())
        return entities

    def get(self, entity_id: int):
        with self._transaction():
            row = self.db.query(self.row_model).filter(self.row_model.id == entity_id).first()
            if row is None:
                raise EntityNotFoundError(self.entity_name, entity_id)
            try:
                entity = self._to_entity(row)
            except (ValueError, TypeError) as e:
                raise PersistenceError(f"{self.entity_name} {entity_id} is unreadable: {e}") from e
        return entity

    def list(self) -> List:
        return self._list(self._newest_first())

    def _insert(self, row):
        with self._transaction():
            self.db.add(row)
            self.db.flush()
            self.db.refresh(row)  # Pick up server-assigned id and created_at
            entity = self._to_entity(row)
        return entity

    def _update(self, entity_id: int, values: Dict[str, Any]) -> None:
        with self._transaction():
            affected = (
                self.db.query(self.row_model)
                .filter(self.row_model.id == entity_id)
                .update(values, synchronize_session=False)
            )
        if affected == 0:
            raise EntityNotFoundError(self.entity_name, entity_id)

    def delete(self, entity_id: int) -> None:
        """Delete by id; dependent credits are removed by the store's ON DELETE CASCADE"""
        with self._transaction():
            affected = (
                self.db.query(self.row_model)
                .filter(self.row_model.id == entity_id)
                .delete(synchronize_session=False)
            )
        if affected == 0:
            raise EntityNotFoundError(self.entity_name, entity_id)


class ItemRepository(_Repository):
    """Repository for items"""

    row_model = ItemRow
    entity_name = "Item"

    def _to_entity(self, row: ItemRow) -> Item:
        return Item(id=row.id, name=row.name, description=row.description, created_at=row.created_at)

    def create(self, name: str, description: Optional[str]) -> Item:
        return self._insert(ItemRow(name=name, description=description))


class ClientRepository(_Repository):
    """Repository for clients"""

    row_model = ClientRow
    entity_name = "Client"

    def _to_entity(self, row: ClientRow) -> Client:
        return Client(
            id=row.id,
            full_name=row.full_name,
            email=row.email,
            birth_date=row.birth_date,
            country=row.country,
            created_at=row.created_at,
        )

    def create(self, full_name: str, email: str, birth_date: date, country: str) -> Client:
        return self._insert(
            ClientRow(full_name=full_name, email=email, birth_date=birth_date, country=country)
        )

    def update(self, client_id: int, full_name: str, email: str, birth_date: date, country: str) -> None:
        self._update(
            client_id,
            {"full_name": full_name, "email": email, "birth_date": birth_date, "country": country},
        )


class BankRepository(_Repository):
    """Repository for banks"""

    row_model = BankRow
    entity_name = "Bank"

    def _to_entity(self, row: BankRow) -> Bank:
        return Bank(id=row.id, name=row.name, type=BankType(row.type), created_at=row.created_at)

    def create(self, name: str, bank_type: BankType) -> Bank:
        return self._insert(BankRow(name=name, type=bank_type.value))

    def update(self, bank_id: int, name: str, bank_type: BankType) -> None:
        self._update(bank_id, {"name": name, "type": bank_type.value})


class CreditRepository(_Repository):
    """Repository for credits, including client- and bank-scoped listings"""

    row_model = CreditRow
    entity_name = "Credit"

    def _to_entity(self, row: CreditRow) -> Credit:
        return Credit(
            id=row.id,
            client_id=row.client_id,
            bank_id=row.bank_id,
            min_payment=row.min_payment,
            max_payment=row.max_payment,
            term_months=row.term_months,
            credit_type=CreditType(row.credit_type),
            status=CreditStatus(row.status),
            created_at=row.created_at,
        )

    def create(
        self,
        client_id: int,
        bank_id: int,
        min_payment: float,
        max_payment: float,
        term_months: int,
        credit_type: CreditType,
        status: CreditStatus,
    ) -> Credit:
        return self._insert(
            CreditRow(
                client_id=client_id,
                bank_id=bank_id,
                min_payment=min_payment,
                max_payment=max_payment,
                term_months=term_months,
                credit_type=credit_type.value,
                status=status.value,
            )
        )

    def update(
        self,
        credit_id: int,
        client_id: int,
        bank_id: int,
        min_payment: float,
        max_payment: float,
        term_months: int,
        credit_type: CreditType,
        status: CreditStatus,
    ) -> None:
        self._update(
            credit_id,
            {
                "client_id": client_id,
                "bank_id": bank_id,
                "min_payment": min_payment,
                "max_payment": max_payment,
                "term_months": term_months,
                "credit_type": credit_type.value,
                "status": status.value,
            },
        )

    def list_by_client(self, client_id: int) -> List[Credit]:
        return self._list(self._newest_first().filter(CreditRow.client_id == client_id))

    def list_by_bank(self, bank_id: int) -> List[Credit]:
        return self._list(self._newest_first().filter(CreditRow.bank_id == bank_id))
