from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from task_manager.domain.ports import IntegrityFailure, StoreFailure


@contextmanager
def store_errors(db: Session) -> Iterator[None]:
    """Roll back and re-raise any SQLAlchemy error as ``StoreFailure``.

    Constraint violations (e.g. a taken unique username) become the more
    specific ``IntegrityFailure``.
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        raise IntegrityFailure(str(e)) from e
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreFailure(str(e)) from e
