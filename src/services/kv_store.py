# src/services/kv_store.py
from typing import Optional, Protocol

import firebase_admin
from firebase_admin import credentials, firestore


class KeyValueStore(Protocol):
    """The storage contract the MappingStore needs for message correlations."""

    def get(self, key: str) -> Optional[dict]:
        ...

    def put(self, key: str, value: dict) -> None:
        ...


class InMemoryKeyValueStore:
    """
    Process-local storage. Everything is lost on restart and nothing is ever
    evicted, so memory grows with the number of relayed messages.
    """
    def __init__(self):
        self._data: dict[str, dict] = {}

    def get(self, key: str) -> Optional[dict]:
        value = self._data.get(key)
        return dict(value) if value is not None else None

    def put(self, key: str, value: dict) -> None:
        self._data[key] = dict(value)

    def __len__(self) -> int:
        return len(self._data)


class FirestoreKeyValueStore:
    """
    Stores each key as one document in a Firestore collection, so correlations
    survive restarts. Opt-in via CORRELATION_BACKEND=firestore.
    """
    def __init__(self, db, collection_name: str = "relay_message_correlations"):
        """
        Args:
            db: An initialized Firestore client instance.
            collection_name: The collection holding one document per key.
        """
        if db is None:
            raise ValueError("Firestore database client 'db' is required.")
        self.collection_ref = db.collection(collection_name)
        print(f"[KV_STORE] Initialized with Firestore collection '{collection_name}'.")

    def get(self, key: str) -> Optional[dict]:
        doc = self.collection_ref.document(key).get()
        if not doc.exists:
            return None
        return doc.to_dict()

    def put(self, key: str, value: dict) -> None:
        # 'set' overwrites the document, giving last-write-wins per key.
        self.collection_ref.document(key).set(value)


def create_firestore_client(cred_path: str):
    """Initializes the Firebase app once and returns a Firestore client."""
    if not firebase_admin._apps:
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred)
    return firestore.client()
