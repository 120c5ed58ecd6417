"""
Firestore-backed document store using the Firestore v1 REST API.
"""

import logging
import random
import string
from typing import Any, Callable, Dict, List, Optional, Sequence

import google.auth
import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from scaffold_ledger.services.error_classifier import ErrorClassifier
from scaffold_ledger.services.retry_handler import RetryHandler
from scaffold_ledger.store.base import Document, DocumentStore, FieldFilter, OrderBy
from scaffold_ledger.store.firestore_codec import (
    build_structured_query,
    build_write,
    decode_fields,
    document_id_from_name,
)
from scaffold_ledger.utils.logging_utils import redact_secrets

logger = logging.getLogger(__name__)

DEFAULT_SCOPES = [
    "https://www.googleapis.com/auth/datastore",
    "https://www.googleapis.com/auth/cloud-platform",
]

_AUTO_ID_ALPHABET = string.ascii_letters + string.digits
_AUTO_ID_LENGTH = 20


def _auto_id() -> str:
    rng = random.SystemRandom()
    return "".join(rng.choice(_AUTO_ID_ALPHABET) for _ in range(_AUTO_ID_LENGTH))


class FirestoreDocumentStore(DocumentStore):
    """
    Document store on Google Cloud Firestore.

    Features:
    - Service account credentials or Application Default Credentials (ADC)
    - Automatic retry with exponential backoff on transient failures
    - Server-side timestamps through commit field transforms
    - Separate client with a read timeout for bulk (display list) queries
    - Transport errors translated to NotFoundError / StoreError
    """

    def __init__(
        self,
        project_id: str,
        database: str = "(default)",
        credentials: Optional[Dict[str, Any]] = None,
        retry_handler: Optional[RetryHandler] = None,
        scopes: Optional[List[str]] = None,
        bulk_read_timeout: float = 30.0,
        service: Any = None,
        bulk_service: Any = None,
    ):
        """
        Initialize the Firestore store.

        Args:
            project_id: Google Cloud project hosting the database
            database: Firestore database id
            credentials: Service account info dict from
                ``LedgerConfig.get_google_service_account_info()``.
                If None, falls back to ADC
            retry_handler: Custom retry handler instance
            scopes: Custom OAuth scopes
            bulk_read_timeout: Read timeout (seconds) for bulk queries
            service: Prebuilt API client (tests)
            bulk_service: Prebuilt API client for bulk reads (tests)
        """
        self.project_id = project_id
        self.database = database
        self.credentials_info = credentials
        self.retry_handler = retry_handler or RetryHandler()
        self.scopes = scopes or DEFAULT_SCOPES
        self.bulk_read_timeout = bulk_read_timeout
        self.classifier = ErrorClassifier()

        self._credentials = None
        self._service = service
        self._bulk_service = bulk_service

    @classmethod
    def from_settings(cls, settings: Any) -> "FirestoreDocumentStore":
        """Build a store from ``LedgerConfig``."""
        return cls(
            project_id=settings.resolved_firestore_project,
            database=settings.firestore_database,
            credentials=settings.get_google_service_account_info(),
            retry_handler=RetryHandler.from_settings(settings),
            scopes=settings.google_scopes,
            bulk_read_timeout=settings.bulk_read_timeout,
        )

    @property
    def database_path(self) -> str:
        return f"projects/{self.project_id}/databases/{self.database}"

    @property
    def documents_root(self) -> str:
        return f"{self.database_path}/documents"

    def document_name(self, collection: str, document_id: str) -> str:
        return f"{self.documents_root}/{collection}/{document_id}"

    def _get_credentials(self):
        if self._credentials is not None:
            return self._credentials

        if self.credentials_info:
            logger.debug(
                "Service account settings: %s", redact_secrets(self.credentials_info)
            )
            self._credentials = service_account.Credentials.from_service_account_info(
                self.credentials_info, scopes=self.scopes
            )
            logger.info(
                f"Firestore store using service account for project: {self.project_id}"
            )
        else:
            self._credentials, adc_project = google.auth.default(scopes=self.scopes)
            logger.info(f"Firestore store using ADC (project: {adc_project})")
        return self._credentials

    def _create_service(self, timeout: Optional[float] = None):
        """
        Create a Firestore REST client.

        Args:
            timeout: Socket timeout for every request made by the client

        Returns:
            Firestore API service instance
        """
        credentials = self._get_credentials()
        if timeout is None:
            return build(
                "firestore", "v1", credentials=credentials, cache_discovery=False
            )

        http = google_auth_httplib2.AuthorizedHttp(
            credentials, http=httplib2.Http(timeout=timeout)
        )
        return build("firestore", "v1", http=http, cache_discovery=False)

    def _documents(self, bulk: bool = False):
        if bulk:
            if self._bulk_service is None:
                self._bulk_service = self._create_service(
                    timeout=self.bulk_read_timeout
                )
            return self._bulk_service.projects().databases().documents()

        if self._service is None:
            self._service = self._create_service()
        return self._service.projects().databases().documents()

    def _execute(
        self,
        operation: Callable[[], Any],
        collection: str,
        document_id: Optional[str] = None,
    ) -> Any:
        try:
            return self.retry_handler.execute_with_retry(operation)
        except Exception as e:
            error = self.classifier.to_ledger_error(e, collection, document_id)
            if error is e:
                raise
            logger.error(f"Firestore call failed: {error}")
            raise error from e

    def get(self, collection: str, document_id: str) -> Optional[Document]:
        name = self.document_name(collection, document_id)

        def _get_operation():
            try:
                return self._documents().get(name=name).execute()
            except HttpError as e:
                if e.resp.status == 404:
                    return None
                raise

        result = self._execute(_get_operation, collection, document_id)
        if result is None:
            return None
        return Document(id=document_id, data=decode_fields(result.get("fields", {})))

    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[OrderBy] = None,
        bulk: bool = False,
    ) -> List[Document]:
        body = build_structured_query(collection, filters, order_by)

        def _query_operation():
            return (
                self._documents(bulk=bulk)
                .runQuery(parent=self.documents_root, body=body)
                .execute()
            )

        results = self._execute(_query_operation, collection)
        documents = [
            Document(
                id=document_id_from_name(item["document"]["name"]),
                data=decode_fields(item["document"].get("fields", {})),
            )
            for item in results or []
            if "document" in item
        ]
        logger.debug(f"Query {collection} returned {len(documents)} docs")
        return documents

    def _commit(self, write: Dict[str, Any], collection: str, document_id: str) -> None:
        def _commit_operation():
            return (
                self._documents()
                .commit(database=self.database_path, body={"writes": [write]})
                .execute()
            )

        self._execute(_commit_operation, collection, document_id)

    def create(self, collection: str, data: Dict[str, Any]) -> str:
        document_id = _auto_id()
        write = build_write(
            self.document_name(collection, document_id), data, must_exist=False
        )
        self._commit(write, collection, document_id)
        logger.debug(f"Created {collection}/{document_id}")
        return document_id

    def set(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        write = build_write(self.document_name(collection, document_id), data)
        self._commit(write, collection, document_id)

    def update(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        write = build_write(
            self.document_name(collection, document_id),
            data,
            merge=True,
            must_exist=True,
        )
        self._commit(write, collection, document_id)

    def delete(self, collection: str, document_id: str) -> None:
        name = self.document_name(collection, document_id)

        def _delete_operation():
            return self._documents().delete(name=name).execute()

        self._execute(_delete_operation, collection, document_id)
