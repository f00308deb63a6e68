"""
Session-Bound Service Base Class

Catalog, order and analytics services all work on one AsyncSession handed
to them by the caller (a FastAPI dependency, a script, a test). This base
class holds that session and the two conversions every service needs:

    - caller input (model or plain mapping) -> validated pydantic model
    - SQLAlchemy failure on commit -> PersistenceError, session rolled back
"""

import logging
from typing import Any, Mapping, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.core.exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class SessionService:
    """
    Base for services that read and write through a caller-owned session.

    The service never opens or closes the session; it only commits the
    writes it makes.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _coerce(schema: type[SchemaT], data: Union[SchemaT, Mapping[str, Any], None]) -> SchemaT:
        """
        Validate caller input against a request schema.

        Raises:
            ValidationError: If the input does not satisfy the schema
        """
        if isinstance(data, schema):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        try:
            return schema.model_validate(data or {})
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

    async def _commit(self) -> None:
        """
        Commit the current transaction.

        Raises:
            PersistenceError: If the database rejects the write
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            message = str(getattr(exc, "orig", None) or exc)
            logger.error(f"Commit failed: {message}")
            raise PersistenceError(message) from exc
