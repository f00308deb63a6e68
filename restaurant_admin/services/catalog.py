"""
Catalog Store

CRUD, search and availability toggling over menu items.

Listing is newest first; search is alphabetical. An empty search term
matches nothing rather than everything.
"""

import json
import logging
from typing import Any, Mapping, Optional, Union

from sqlalchemy import Text, cast, or_, select

from restaurant_admin.core.exceptions import NotFoundError
from restaurant_admin.models import MenuItem, utc_now
from restaurant_admin.schemas import MenuFilter, MenuItemCreate, MenuItemUpdate
from restaurant_admin.services.base import SessionService
from restaurant_admin.services.query_builder import menu_item_query

logger = logging.getLogger(__name__)

# Fields that keep their stored value when an update sends null
_NON_NULLABLE_FIELDS = frozenset({"name", "category", "price", "ingredients", "is_available"})


class CatalogStore(SessionService):
    """Owns every read and write of the menu_items table."""

    async def list_items(
        self,
        filters: Union[MenuFilter, Mapping[str, Any], None] = None,
    ) -> list[MenuItem]:
        """List menu items matching every supplied filter, newest first."""
        filters = self._coerce(MenuFilter, filters)
        stmt = menu_item_query(filters).select(
            MenuItem.created_at.desc(),
            MenuItem.id.desc(),
        )
        result = await self.session.scalars(stmt)
        return list(result.all())

    async def search(self, term: Optional[str]) -> list[MenuItem]:
        """
        Case-insensitive substring search over name and ingredients.

        The database narrows the candidates; the final match is made against
        the name and each decoded ingredient, so JSON punctuation and text
        spanning two ingredients never match.

        Args:
            term: Text to look for; blank means "no search", not "everything"

        Returns:
            Matching items ordered by name
        """
        if term is None or not term.strip():
            return []

        stmt = select(MenuItem).order_by(MenuItem.name.asc(), MenuItem.id.asc())
        # SQLite only folds ASCII case, so non-ASCII terms are matched in Python alone
        if term.isascii():
            encoded = json.dumps(term, ensure_ascii=False)[1:-1]
            stmt = stmt.where(
                or_(
                    MenuItem.name.icontains(term, autoescape=True),
                    cast(MenuItem.ingredients, Text).icontains(encoded, autoescape=True),
                )
            )
        result = await self.session.scalars(stmt)

        needle = term.casefold()
        return [
            item
            for item in result.all()
            if needle in item.name.casefold()
            or any(needle in ingredient.casefold() for ingredient in item.ingredients or [])
        ]

    async def get(self, item_id: int) -> MenuItem:
        """
        Fetch one menu item.

        Raises:
            NotFoundError: If no item has this id
        """
        item = await self.session.get(MenuItem, item_id)
        if item is None:
            raise NotFoundError("Menu item not found")
        return item

    async def create(self, fields: Union[MenuItemCreate, Mapping[str, Any]]) -> MenuItem:
        """
        Add a catalog entry.

        Raises:
            ValidationError: Missing name, unknown category or negative price
        """
        data = self._coerce(MenuItemCreate, fields)
        values = data.model_dump()
        values["ingredients"] = values["ingredients"] or []
        item = MenuItem(**values)
        self.session.add(item)
        await self._commit()

        logger.info(f"Menu item #{item.id} created: {item.name} ({item.category.value})")
        return item

    async def update(
        self,
        item_id: int,
        fields: Union[MenuItemUpdate, Mapping[str, Any]],
    ) -> MenuItem:
        """
        Apply a partial update; fields absent from the input are untouched.

        Raises:
            ValidationError: If a supplied field is invalid
            NotFoundError: If no item has this id
        """
        data = self._coerce(MenuItemUpdate, fields)
        item = await self.get(item_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in _NON_NULLABLE_FIELDS:
                continue
            setattr(item, field, value)
        item.updated_at = utc_now()

        await self._commit()
        logger.info(f"Menu item #{item.id} updated")
        return item

    async def delete(self, item_id: int) -> None:
        """
        Remove a menu item for good. Order lines that reference it are kept.

        Raises:
            NotFoundError: If no item has this id
        """
        item = await self.get(item_id)
        await self.session.delete(item)
        await self._commit()
        logger.info(f"Menu item #{item_id} deleted")

    async def toggle_availability(self, item_id: int) -> MenuItem:
        """
        Flip is_available.

        Raises:
            NotFoundError: If no item has this id
        """
        item = await self.get(item_id)
        item.is_available = not item.is_available
        item.updated_at = utc_now()
        await self._commit()

        logger.info(
            f"Menu item #{item.id} is now {'available' if item.is_available else 'unavailable'}"
        )
        return item
