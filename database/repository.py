"""Per-collection document repositories.

Every collection is reached through the same small capability set
(get-all, get-filtered, get, put, patch, delete).  Documents travel as
plain dictionaries holding an ``id`` key plus the stored fields, so the
service layer never touches Peewee models directly.
"""

from __future__ import annotations

import copy
import logging
import operator
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from peewee import Database
from playhouse.shortcuts import model_to_dict

from database.models import DocumentModel, JSONField

logger = logging.getLogger(__name__)

Document = dict[str, Any]

_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class RecordNotFoundError(LookupError):
    """Requested document does not exist in the collection."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


@dataclass(frozen=True)
class Filter:
    """Single ``field <op> value`` condition, e.g. ``Filter("status", "!=", "archived")``."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS and self.op != "in":
            raise ValueError(f"Unsupported filter operator: {self.op}")


class Repository(Protocol):
    collection: str

    def get_all(self) -> list[Document]: ...

    def get_filtered(self, *filters: Filter) -> list[Document]: ...

    def get(self, doc_id: str) -> Document | None: ...

    def put(
        self, data: Mapping[str, Any], doc_id: str | None = None, *, merge: bool = False
    ) -> Document: ...

    def patch(self, doc_id: str, data: Mapping[str, Any]) -> Document: ...

    def delete(self, doc_id: str) -> None: ...


def deep_merge(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Merge nested maps key by key; lists and scalars are replaced."""
    merged = copy.deepcopy(dict(base))
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class PeeweeRepository:
    """Repository backed by one Peewee document table."""

    def __init__(self, model: type[DocumentModel], database: Database | None = None) -> None:
        self.model = model
        self.collection = model._meta.table_name
        self._database = database or model._meta.database
        self._fields = {
            name: field
            for name, field in model._meta.fields.items()
            if name != "id"
        }

    # ─────────────────────────── reads ───────────────────────────

    def get_all(self) -> list[Document]:
        return [self._to_document(row) for row in self.model.select()]

    def get_filtered(self, *filters: Filter) -> list[Document]:
        query = self.model.select()
        for flt in filters:
            query = query.where(self._condition(flt))
        return [self._to_document(row) for row in query]

    def get(self, doc_id: str) -> Document | None:
        if not doc_id:
            return None
        row = self.model.get_or_none(self.model.id == doc_id)
        return self._to_document(row) if row is not None else None

    # ─────────────────────────── writes ──────────────────────────

    def put(
        self, data: Mapping[str, Any], doc_id: str | None = None, *, merge: bool = False
    ) -> Document:
        """Add a new document or set an existing one.

        Without ``doc_id`` a new identifier is assigned.  With ``merge`` the
        given fields are merged into the stored document (nested maps merged
        key by key); otherwise the document is replaced as a whole.
        """
        values = self._clean(data)
        with self._database.atomic():
            if doc_id is None:
                row = self.model.create(**values)
                logger.debug("➕ %s/%s created", self.collection, row.id)
                return self._reload(row.id)

            existing = self.model.get_or_none(self.model.id == doc_id)
            if existing is not None and merge:
                return self._merge_into(existing, values)
            if existing is not None:
                existing.delete_instance()
            row = self.model.create(id=doc_id, **values)
            logger.debug("💾 %s/%s set", self.collection, doc_id)
            return self._reload(row.id)

    def patch(self, doc_id: str, data: Mapping[str, Any]) -> Document:
        values = self._clean(data)
        with self._database.atomic():
            existing = self.model.get_or_none(self.model.id == doc_id)
            if existing is None:
                raise RecordNotFoundError(self.collection, doc_id)
            return self._merge_into(existing, values)

    def delete(self, doc_id: str) -> None:
        deleted = self.model.delete().where(self.model.id == doc_id).execute()
        if not deleted:
            logger.warning("❗ %s/%s not found for deletion", self.collection, doc_id)
        else:
            logger.info("🗑 %s/%s deleted", self.collection, doc_id)

    # ─────────────────────────── helpers ─────────────────────────

    def _merge_into(self, row: DocumentModel, values: Mapping[str, Any]) -> Document:
        for name, value in values.items():
            current = getattr(row, name)
            if (
                isinstance(self._fields[name], JSONField)
                and isinstance(current, Mapping)
                and isinstance(value, Mapping)
            ):
                value = deep_merge(current, value)
            setattr(row, name, value)
        if values:
            row.save(only=[self._fields[name] for name in values])
        logger.debug("✏️ %s/%s patched: %s", self.collection, row.id, sorted(values))
        return self._reload(row.id)

    def _clean(self, data: Mapping[str, Any]) -> dict[str, Any]:
        values = {key: value for key, value in data.items() if key != "id"}
        unknown = set(values) - set(self._fields)
        if unknown:
            names = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown fields for {self.collection}: {names}")
        return values

    def _condition(self, flt: Filter):
        field = self._fields.get(flt.field)
        if field is None:
            raise ValueError(f"Unknown field for {self.collection}: {flt.field}")
        if flt.op == "in":
            return field.in_(list(flt.value))
        return _OPERATORS[flt.op](field, flt.value)

    def _reload(self, doc_id: str) -> Document:
        return self._to_document(self.model.get_by_id(doc_id))

    @staticmethod
    def _to_document(row: DocumentModel) -> Document:
        return model_to_dict(row, recurse=False)

