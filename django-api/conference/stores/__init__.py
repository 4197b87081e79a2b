from conference.stores.interfaces import DocumentStore, StoreError
from conference.stores.memory_store import InMemoryDocumentStore

__all__ = ["DocumentStore", "StoreError", "InMemoryDocumentStore"]
