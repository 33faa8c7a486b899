"""
Sidebar repository - folders and table items of the navigation tree
"""
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import case, func

from models import SidebarItem, ITEM_TYPES
from services.base_repository import BaseRepository
from services.errors import NotFoundError, ValidationError
from services.schema_repository import SchemaRepository
from utils.logger import get_logger

logger = get_logger(__name__)

UPDATABLE_FIELDS = ("name", "icon", "sort_order", "parent_id")


def build_tree(flat_items: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Build a forest from a flat list of sidebar items

    Works on plain dicts carrying at least ``id`` and ``parent_id``. Every
    node gets a ``children`` list; children keep the order of the input.
    Items whose parent is not in the list are returned as roots.

    Nodes only reference their children, never their parent.
    """
    nodes: Dict[int, Dict[str, Any]] = {}
    for item in flat_items:
        nodes[item["id"]] = {**item, "children": []}

    roots = []
    for item in flat_items:
        node = nodes[item["id"]]
        parent = nodes.get(item.get("parent_id")) if item.get("parent_id") is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent["children"].append(node)

    return roots


def _children_index(pairs: Sequence[tuple]) -> Dict[Optional[int], List[int]]:
    index: Dict[Optional[int], List[int]] = {}
    for item_id, parent_id in pairs:
        index.setdefault(parent_id, []).append(item_id)
    return index


class SidebarRepository(BaseRepository):
    """CRUD over the sidebar item hierarchy"""

    def list_items(self) -> List[SidebarItem]:
        """Root items first, then by sort_order, then by name"""
        roots_first = case((SidebarItem.parent_id.is_(None), 0), else_=1)
        return (
            self.db.query(SidebarItem)
            .order_by(roots_first, SidebarItem.parent_id, SidebarItem.sort_order, SidebarItem.name)
            .all()
        )

    def find(self, item_id: int) -> Optional[SidebarItem]:
        return self.db.query(SidebarItem).filter(SidebarItem.id == item_id).first()

    def get(self, item_id: int) -> SidebarItem:
        item = self.find(item_id)
        if not item:
            raise NotFoundError(f"Sidebar item with id {item_id} not found")
        return item

    def count(self) -> int:
        return self.db.query(SidebarItem).count()

    def next_sort_order(self, parent_id: Optional[int]) -> int:
        """max(sibling sort_order) + 1, root items share one scope"""
        query = self.db.query(func.max(SidebarItem.sort_order))
        if parent_id is None:
            query = query.filter(SidebarItem.parent_id.is_(None))
        else:
            query = query.filter(SidebarItem.parent_id == parent_id)
        current = query.scalar()
        return (current if current is not None else 0) + 1

    def subtree_ids(self, item_id: int) -> List[int]:
        """The item and all of its descendants, parents before children"""
        pairs = self.db.query(SidebarItem.id, SidebarItem.parent_id).all()
        children = _children_index(pairs)

        result = [item_id]
        seen = {item_id}
        position = 0
        while position < len(result):
            for child_id in children.get(result[position], []):
                if child_id not in seen:
                    seen.add(child_id)
                    result.append(child_id)
            position += 1
        return result

    def create(
        self,
        name: str,
        parent_id: Optional[int] = None,
        item_type: str = "folder",
        icon: Optional[str] = None
    ) -> SidebarItem:
        """Create a folder or table item at the end of its siblings"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")
        if item_type not in ITEM_TYPES:
            raise ValidationError(
                f"Invalid item_type '{item_type}'",
                details={"allowed": list(ITEM_TYPES)}
            )
        if parent_id is not None:
            self._require_folder(parent_id)

        item = SidebarItem(
            name=name,
            parent_id=parent_id,
            item_type=item_type,
            icon=icon,
            sort_order=self.next_sort_order(parent_id)
        )
        self._save(item)
        logger.info("Sidebar item created", sidebar_item_id=item.id, item_type=item_type, parent_id=parent_id)
        return item

    def update(self, item_id: int, updates: Dict[str, Any]) -> SidebarItem:
        """
        Partial update of name, icon, sort_order and parent_id

        Only keys present in ``updates`` change. A ``parent_id`` key moves
        the item (None moves it to the root). Nothing is written when every
        supplied value equals the current one.
        """
        item = self.get(item_id)
        changes = {key: value for key, value in updates.items() if key in UPDATABLE_FIELDS}

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Name is required")
            changes["name"] = name
        if "sort_order" in changes and changes["sort_order"] is None:
            del changes["sort_order"]

        changes = {key: value for key, value in changes.items() if getattr(item, key) != value}
        if not changes:
            return item

        if "parent_id" in changes:
            self._check_move(item, changes["parent_id"])

        for field, value in changes.items():
            setattr(item, field, value)

        self._commit()
        self.db.refresh(item)
        logger.info("Sidebar item updated", sidebar_item_id=item_id, fields=sorted(changes))
        return item

    def rename(self, item_id: int, name: str) -> SidebarItem:
        return self.update(item_id, {"name": name})

    def delete(self, item_id: int) -> List[int]:
        """
        Delete an item with all of its descendants

        Table items in the subtree release their dynamic table, column
        definitions and row data first. Returns the deleted item ids.
        """
        self.get(item_id)
        ids = self.subtree_ids(item_id)

        released = SchemaRepository(self.db).delete_tables_for_sidebar_items(ids)
        self.db.query(SidebarItem).filter(SidebarItem.id.in_(ids)).delete(synchronize_session=False)
        self._commit()

        logger.info("Sidebar item deleted", sidebar_item_id=item_id, deleted_items=len(ids), released_tables=released)
        return ids

    def _require_folder(self, parent_id: int) -> SidebarItem:
        parent = self.find(parent_id)
        if not parent:
            raise NotFoundError(f"Parent item with id {parent_id} not found")
        if parent.item_type != "folder":
            raise ValidationError(f"Parent item {parent_id} is not a folder")
        return parent

    def _check_move(self, item: SidebarItem, new_parent_id: Optional[int]) -> None:
        if new_parent_id is None:
            return
        if new_parent_id == item.id:
            raise ValidationError("An item cannot be its own parent")
        parent = self.find(new_parent_id)
        if not parent:
            raise ValidationError(f"Parent item with id {new_parent_id} not found")
        if parent.item_type != "folder":
            raise ValidationError(f"Parent item {new_parent_id} is not a folder")
        if new_parent_id in self.subtree_ids(item.id):
            raise ValidationError("An item cannot be moved into one of its descendants")
