from contextlib import contextmanager

from pymongo.errors import PyMongoError

from assignment_portal.core.errors import StorageFailure


@contextmanager
def storage_guard(operation: str):
    """Converte gli errori inattesi del driver in StorageFailure (il log è a carico dell'handler dell'app)."""
    try:
        yield
    except PyMongoError as e:
        raise StorageFailure(operation=operation) from e
