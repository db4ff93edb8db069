"""JSON-file document store.

Each collection lives in one JSON file holding an object of id -> document.
Writes go to a temp file in the same directory and are moved over the
original, so a reader never sees a half-written collection. A lock per
collection serializes read-modify-write within the process.

The store is an explicit handle: construct it, open() it before use and
close() it on shutdown (the FastAPI lifespan does both).
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from kitchen.infra.paths import COLLECTIONS, collection_file

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class DocumentStore:
    def __init__(self, data_dir, collections=COLLECTIONS):
        self.data_dir = Path(data_dir)
        self.collections = tuple(collections)
        self._locks = {name: Lock() for name in self.collections}
        self._open = False

    # --- Lifecycle ----------------------------------------------------------
    def open(self) -> "DocumentStore":
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for name in self.collections:
            path = collection_file(self.data_dir, name)
            if not path.exists():
                self._write(name, {})
        self._open = True
        logger.info("Document store opened at %s", self.data_dir)
        return self

    def close(self):
        self._open = False
        logger.info("Document store closed")

    @property
    def is_open(self) -> bool:
        return self._open

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # --- File helpers ---------------------------------------------------------
    def _check(self, collection: str):
        if not self._open:
            raise RuntimeError("Document store is not open")
        if collection not in self._locks:
            raise KeyError(f"Unknown collection: {collection}")

    def _read(self, collection: str) -> Dict[str, Document]:
        path = collection_file(self.data_dir, collection)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            logger.error("Collection file %s is not a JSON object; treating as empty", path)
            return {}
        return data

    def _write(self, collection: str, documents: Dict[str, Document]):
        path = collection_file(self.data_dir, collection)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), prefix=f".{collection}_", suffix=".json")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp:
                json.dump(documents, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    # --- CRUD -------------------------------------------------------------------
    def insert(self, collection: str, document: Document) -> Document:
        '''Stores a new document under a fresh id and returns the stored copy.'''
        self._check(collection)
        doc = dict(document)
        doc['id'] = doc.get('id') or uuid4().hex
        with self._locks[collection]:
            documents = self._read(collection)
            if doc['id'] in documents:
                raise KeyError(f"Duplicate id {doc['id']} in {collection}")
            documents[doc['id']] = doc
            self._write(collection, documents)
        return dict(doc)

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        self._check(collection)
        with self._locks[collection]:
            doc = self._read(collection).get(doc_id)
        return dict(doc) if doc is not None else None

    def find(self, collection: str, predicate: Optional[Callable[[Document], bool]] = None,
             **filters) -> List[Document]:
        '''Returns documents whose fields equal every keyword filter and that satisfy predicate.'''
        self._check(collection)
        with self._locks[collection]:
            documents = list(self._read(collection).values())
        result = []
        for doc in documents:
            if any(doc.get(k) != v for k, v in filters.items()):
                continue
            if predicate is not None and not predicate(doc):
                continue
            result.append(dict(doc))
        return result

    def replace(self, collection: str, doc_id: str, document: Document) -> Document:
        self._check(collection)
        doc = dict(document)
        doc['id'] = doc_id
        with self._locks[collection]:
            documents = self._read(collection)
            if doc_id not in documents:
                raise KeyError(f"No document {doc_id} in {collection}")
            documents[doc_id] = doc
            self._write(collection, documents)
        return dict(doc)

    def delete(self, collection: str, doc_id: str) -> bool:
        self._check(collection)
        with self._locks[collection]:
            documents = self._read(collection)
            if documents.pop(doc_id, None) is None:
                return False
            self._write(collection, documents)
        return True


__all__ = ['DocumentStore', 'Document']
