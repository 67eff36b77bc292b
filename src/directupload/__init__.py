"""
directupload - signed form fields for direct browser uploads to S3
"""

__version__ = "1.0.0"

from .client import DirectUploadClient
from .credentials import AVAILABLE_REGIONS, Credentials
from .options import CANNED_ACLS, RESERVED_INPUTS, Options, normalize_options
from .policy import Policy
from ._signer import Signature, derive_signing_key
from .models import (
    SignedPolicy,
    CredentialProvider,
    PolicyProvider,
    SignatureProvider,
)
from .error import (
    DirectUploadException,
    InvalidRegionException,
    InvalidACLException,
    InvalidOptionsException,
)

__all__ = [
    "DirectUploadClient",
    "AVAILABLE_REGIONS",
    "Credentials",
    "CANNED_ACLS",
    "RESERVED_INPUTS",
    "Options",
    "normalize_options",
    "Policy",
    "Signature",
    "derive_signing_key",
    "SignedPolicy",
    "CredentialProvider",
    "PolicyProvider",
    "SignatureProvider",
    "DirectUploadException",
    "InvalidRegionException",
    "InvalidACLException",
    "InvalidOptionsException",
]
