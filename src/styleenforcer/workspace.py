"""Documents, whole-program solutions and cooperative cancellation."""
from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType

from styleenforcer.errors import OperationCancelledError
from styleenforcer.syntax import Node, full_text


class CancellationToken:
    """Thread-safe cancellation flag checked at operation boundaries."""

    def __init__(self) -> None:
        self._event: threading.Event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError("Operation was cancelled")


class _NeverCancelledToken(CancellationToken):
    """Shared default token. ``cancel()`` is ignored."""

    def cancel(self) -> None:
        pass


NEVER_CANCELLED: CancellationToken = _NeverCancelledToken()


@dataclass(frozen=True)
class Document:
    """One analyzed unit: an id (usually its path) and its syntax tree."""

    id: str
    root: Node

    @cached_property
    def text(self) -> str:
        return full_text(self.root)

    def with_root(self, root: Node) -> Document:
        return Document(id=self.id, root=root)


@dataclass(frozen=True)
class Solution:
    """Immutable whole-program state: every document under analysis."""

    documents: MappingProxyType[str, Document] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def of(cls, *documents: Document) -> Solution:
        return cls(documents=MappingProxyType({doc.id: doc for doc in documents}))

    def get_document(self, document_id: str) -> Document:
        try:
            return self.documents[document_id]
        except KeyError:
            raise KeyError(f"Unknown document: {document_id!r}") from None

    def with_document(self, document: Document) -> Solution:
        documents: dict[str, Document] = dict(self.documents)
        documents[document.id] = document
        return Solution(documents=MappingProxyType(documents))

    def changed_documents(self, other: Solution) -> list[str]:
        """Ids of documents whose tree differs between *self* and *other*."""
        return [
            doc_id
            for doc_id, doc in other.documents.items()
            if doc_id not in self.documents or self.documents[doc_id].root is not doc.root
        ]

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents.values())

    def __len__(self) -> int:
        return len(self.documents)
