"""
Data models and collaborator interfaces for the direct upload signer
"""

from dataclasses import dataclass, asdict
from typing import Dict, Protocol


@dataclass(frozen=True)
class SignedPolicy:
    """Represents an out-of-band policy signed with the current time."""
    credential: str
    datetime: str
    signature: str
    policy: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


class CredentialProvider(Protocol):
    """Produces the credential scope fields of a signed form."""

    @property
    def amz_date(self) -> str: ...

    def amz_credential(self) -> str: ...


class PolicyProvider(Protocol):
    """Produces the base64 policy document."""

    def generate(self) -> str: ...


class SignatureProvider(Protocol):
    """Produces the hex signature of the policy document."""

    def generate(self) -> str: ...
