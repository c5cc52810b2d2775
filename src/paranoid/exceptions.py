"""
Soft Delete Exceptions
"""


class SoftDeleteError(Exception):
    """Base class for soft delete errors"""


class SoftDeleteConfigurationError(SoftDeleteError):
    """Raised when a model cannot be (or has not been) set up for soft delete"""


class FrozenRecordError(SoftDeleteError, AttributeError):
    """Raised when writing to an instance that was deleted or destroyed"""

    def __init__(self, record, attribute: str):
        self.record = record
        self.attribute = attribute
        super().__init__(
            f"can't modify frozen {type(record).__name__}: attribute '{attribute}' is read-only"
        )


class RecordNotFoundError(SoftDeleteError, LookupError):
    """Raised when a lookup by primary key finds no row in the requested scope"""

    def __init__(self, model, ident, scope):
        self.model = model
        self.ident = ident
        self.scope = scope
        super().__init__(f"Couldn't find {model.__name__} with id={ident!r} (scope={scope.value})")
