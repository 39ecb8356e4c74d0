"""Document hand-off: pending notices and the download proxy client."""
from nova.documents.client import DocumentClient
from nova.documents.pending import PendingDocument, PendingDocumentStore

__all__ = ["DocumentClient", "PendingDocument", "PendingDocumentStore"]
