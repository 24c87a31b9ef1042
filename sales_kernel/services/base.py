"""
BaseService -- abstract base for kernel services.

Services receive a SQLAlchemy ``Session`` and persist changes with
``session.flush()``, never ``session.commit()``.  The caller owns the
transaction (see ``sales_kernel.db.engine.session_scope``), so a sale
commit and the discount-code use it consumes land atomically.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from sales_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for kernel services.

    Guarantees:
        - The service never commits or rolls back.
    """

    def __init__(self, session: Session):
        self.session = session
