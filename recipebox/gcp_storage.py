from __future__ import annotations

from typing import Optional

from google.api_core import exceptions as gcloud_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore, storage

from .storage import Persistence, StorageReadError, StorageWriteError

SLOT_FIELD = "value"
SLOT_CONTENT_TYPE = "application/json"


class FirestorePersistence(Persistence):
    """Keeps the serialized recipe list in a single Firestore document."""

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "app_state",
        key: str = "recipes",
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._project = project
        self._collection_name = collection_name
        self._key = key

        self._firestore_client = client if client is not None else firestore.Client(project=project)
        self._document = self._firestore_client.collection(collection_name).document(key)

    def load(self) -> Optional[bytes]:
        try:
            snapshot = self._document.get()
        except (gcloud_exceptions.GoogleAPICallError, auth_exceptions.GoogleAuthError) as exc:
            raise StorageReadError(
                f"Could not read {self._collection_name}/{self._key} from Firestore: {exc}"
            ) from exc

        if not snapshot.exists:
            return None

        data = snapshot.to_dict() or {}
        value = data.get(SLOT_FIELD)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value
        return str(value).encode("utf-8")

    def save(self, data: bytes) -> None:
        try:
            self._document.set({SLOT_FIELD: data.decode("utf-8")})
        except (gcloud_exceptions.GoogleAPICallError, auth_exceptions.GoogleAuthError) as exc:
            raise StorageWriteError(
                f"Could not write {self._collection_name}/{self._key} to Firestore: {exc}"
            ) from exc


class CloudStoragePersistence(Persistence):
    """Keeps the serialized recipe list as a single Cloud Storage object."""

    def __init__(
        self,
        *,
        bucket_name: str,
        project: Optional[str] = None,
        key: str = "recipes",
        client: Optional[storage.Client] = None,
    ) -> None:
        if not bucket_name:
            raise RuntimeError("A Cloud Storage bucket must be configured to store recipes.")

        self._project = project
        self._bucket_name = bucket_name
        self._blob_name = f"{key}.json"

        self._storage_client = client if client is not None else storage.Client(project=project)
        self._bucket = self._storage_client.bucket(bucket_name)

    def load(self) -> Optional[bytes]:
        blob = self._bucket.blob(self._blob_name)

        try:
            return blob.download_as_bytes()
        except gcloud_exceptions.NotFound:
            return None
        except (gcloud_exceptions.GoogleAPICallError, auth_exceptions.GoogleAuthError) as exc:
            raise StorageReadError(
                f"Could not read gs://{self._bucket_name}/{self._blob_name}: {exc}"
            ) from exc

    def save(self, data: bytes) -> None:
        blob = self._bucket.blob(self._blob_name)

        try:
            blob.upload_from_string(data, content_type=SLOT_CONTENT_TYPE)
        except (gcloud_exceptions.GoogleAPICallError, auth_exceptions.GoogleAuthError) as exc:
            raise StorageWriteError(
                f"Could not write gs://{self._bucket_name}/{self._blob_name}: {exc}"
            ) from exc


__all__ = ["CloudStoragePersistence", "FirestorePersistence"]
