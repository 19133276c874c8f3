"""
Shared access signature (SAS) tokens for single blobs.

A SAS is a query string listing what it allows (resource, permissions,
validity window, protocol) plus an HMAC of those fields made with the
account key. The storage service recomputes the HMAC and rejects the
request if anything was altered or the window has closed. Signing is
purely local: no request is made to the service.
"""

import logging
from datetime import datetime

from azure.storage.blob import BlobSasPermissions, generate_blob_sas

from ...core.models import StorageCredential

logger = logging.getLogger(__name__)

# Accept the token over both transports (Azurite is plain HTTP).
SAS_PROTOCOL = "https,http"


class SasTokenSigner:
    """
    Signs write-only blob tokens with the account's shared key.

    Implements core.protocols.TokenSigner.
    """

    def __init__(self, credential: StorageCredential) -> None:
        self._credential = credential

    def sign_write_token(
        self,
        container_name: str,
        blob_name: str,
        starts_on: datetime,
        expires_on: datetime,
    ) -> str:
        """
        Token granting write (create/overwrite) on exactly one blob.

        No read, delete or list rights, and nothing outside this blob.
        """
        return generate_blob_sas(
            account_name=self._credential.account_name,
            container_name=container_name,
            blob_name=blob_name,
            account_key=self._credential.account_key,
            permission=BlobSasPermissions(write=True),
            start=starts_on,
            expiry=expires_on,
            protocol=SAS_PROTOCOL,
        )
