"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Candidate entity violates an enum or numeric rule"""

    pass


class EntityNotFoundError(DomainException):
    """No row matches the requested id"""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class PersistenceError(DomainException):
    """Store failed to execute a statement"""

    pass
