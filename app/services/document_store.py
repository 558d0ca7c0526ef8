from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from sqlmodel import Session, SQLModel, select

from app.models.novel import Novel
from app.models.payment import PaymentRecord
from app.models.notifications import Notification

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "novels": Novel,
    "payments": PaymentRecord,
    "notifications": Notification,
}


class DocumentNotFound(Exception):
    def __init__(self, collection: str, doc_id: Any):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} does not exist")


class DocumentStore:
    """
    Document-style access (get / update / add) over the SQL tables.

    Every write commits on its own unless it happens inside ``atomic()``,
    in which case the whole block commits once or rolls back.
    """

    def __init__(self, session: Session):
        self.session = session
        self._depth = 0

    def _model(self, collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}")

    def _write(self):
        if self._depth:
            self.session.flush()
        else:
            self.session.commit()

    def get(self, collection: str, doc_id: Any) -> Optional[SQLModel]:
        return self.session.get(self._model(collection), doc_id)

    def update(self, collection: str, doc_id: Any, fields: Dict[str, Any]) -> SQLModel:
        """Patch an existing document. Never creates one."""
        model = self._model(collection)
        doc = self.session.get(model, doc_id)
        if doc is None:
            raise DocumentNotFound(collection, doc_id)

        for name, value in fields.items():
            if name not in model.model_fields:
                raise ValueError(f"{collection} has no field {name!r}")
            setattr(doc, name, value)

        if "updated_at" in model.model_fields and "updated_at" not in fields:
            doc.updated_at = datetime.utcnow()

        self.session.add(doc)
        self._write()
        logger.debug(f"Updated {collection}/{doc_id}: {sorted(fields)}")
        return doc

    def add(self, collection: str, fields: Dict[str, Any]) -> SQLModel:
        doc = self._model(collection)(**fields)
        self.session.add(doc)
        self._write()
        return doc

    def find(self, collection: str, **filters) -> List[SQLModel]:
        model = self._model(collection)
        query = select(model)
        for name, value in filters.items():
            query = query.where(getattr(model, name) == value)
        return list(self.session.exec(query).all())

    @contextmanager
    def atomic(self):
        self._depth += 1
        try:
            yield self
            if self._depth == 1:
                self.session.commit()
        except Exception:
            if self._depth == 1:
                self.session.rollback()
            raise
        finally:
            self._depth -= 1
