"""In-memory store of parallel per-locale content for one editing session."""

import copy
import logging
from typing import Any

from ..domain import LOCALES, ListItem, Locale, LocaleContent, LocalizedDocument
from ..domain.exceptions import ItemNotFoundError

logger = logging.getLogger(__name__)


class LanguageContentStore:
    """Holds a LocalizedDocument and applies editor changes to it in place.

    Items are added and removed in every locale at once and share one id,
    so the n-th entry of a list means the same thing in fr, ar and en.
    Reordering is document-wide: moving an item in one locale moves the
    item with the same id in the others.
    """

    def __init__(self, document: LocalizedDocument) -> None:
        self.document = document

    def content(self, locale: Locale | str) -> LocaleContent:
        return self.document[locale]

    def items(self, locale: Locale | str, key: str) -> list[ListItem]:
        return self.document[locale].items(key)

    def set_field(self, locale: Locale | str, name: str, value: Any) -> None:
        """Set a scalar field (title, heroTitle...) of one locale."""
        self.document[locale].set_field(name, value)

    def item(self, locale: Locale | str, key: str, index: int) -> ListItem:
        """Get the item at ``index``.

        Raises:
            ItemNotFoundError: If the list has no item at that position.
        """
        items = self.items(locale, key)
        if not 0 <= index < len(items):
            raise ItemNotFoundError(
                f"No item {index} in list '{key}' ({Locale.parse(locale)})",
                context={"list": key, "index": index, "length": len(items)},
            )
        return items[index]

    def find_index(self, locale: Locale | str, key: str, item_id: str) -> int | None:
        for position, item in enumerate(self.items(locale, key)):
            if item.id == item_id:
                return position
        return None

    def _is_orphan(self, locale: Locale | str, key: str, item_id: str) -> bool:
        """True when no other locale has an item with ``item_id``."""
        own = Locale.parse(locale)
        return all(
            self.find_index(other, key, item_id) is None for other in LOCALES if other != own
        )

    def add_item(self, key: str, **fields: Any) -> ListItem:
        """Append a new item to the list in every locale.

        Args:
            key: List key.
            **fields: Initial authored fields, copied into each locale.

        Returns:
            The new item as stored in the French content.
        """
        first = ListItem(**fields)
        for locale in LOCALES:
            item = first if locale == Locale.FR else first.model_copy(deep=True)
            self.items(locale, key).append(item)
        return first

    def update_item(self, locale: Locale | str, key: str, index: int, **fields: Any) -> ListItem:
        """Update authored fields of one item in one locale."""
        item = self.item(locale, key, index)
        for name, value in fields.items():
            item.set_field(name, copy.deepcopy(value))
        return item

    def remove_item(self, key: str, index: int, locale: Locale | str = Locale.FR) -> ListItem:
        """Remove the item at ``index`` of ``locale`` from every locale."""
        removed = self.item(locale, key, index)
        for other in LOCALES:
            position = self.find_index(other, key, removed.id)
            if position is not None:
                del self.items(other, key)[position]
        return removed

    def move_item(
        self, key: str, from_index: int, to_index: int, locale: Locale | str = Locale.FR
    ) -> None:
        """Move an item to a new position in every locale."""
        moved = self.item(locale, key, from_index)
        for other in LOCALES:
            items = self.items(other, key)
            position = self.find_index(other, key, moved.id)
            if position is None:
                continue
            item = items.pop(position)
            items.insert(max(0, min(to_index, len(items))), item)

    def ensure_item(self, locale: Locale | str, key: str, index: int, item_id: str) -> ListItem:
        """Return the item with ``item_id``, creating it at ``index`` if missing.

        An item already at ``index`` whose id no other locale knows is
        taken over and re-keyed to ``item_id``. Otherwise a list shorter
        than ``index`` is first padded with empty placeholder items.
        """
        items = self.items(locale, key)
        position = self.find_index(locale, key, item_id)
        if position is not None:
            return items[position]
        if index < len(items) and self._is_orphan(locale, key, items[index].id):
            logger.debug("Re-keyed %s[%d] (%s) from %s to %s", key, index, locale, items[index].id, item_id)
            items[index].id = item_id
            return items[index]
        while len(items) < index:
            items.append(ListItem.placeholder())
        placeholder = ListItem.placeholder(item_id)
        items.insert(index, placeholder)
        logger.debug("Created placeholder item %s at %s[%d] (%s)", item_id, key, index, locale)
        return placeholder

    def align(self, key: str, index: int, source: Locale | str) -> ListItem:
        """Make every locale hold the items of ``source`` up to ``index``.

        Items missing from a locale are inserted as placeholders carrying
        the source ids, at the source positions.

        Returns:
            The source item at ``index``.
        """
        source_items = self.items(source, key)
        target = self.item(source, key, index)
        for other in LOCALES:
            if other == Locale.parse(source):
                continue
            for position in range(index + 1):
                self.ensure_item(other, key, position, source_items[position].id)
        return target
