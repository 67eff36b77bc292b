"""
AWS Signature V4 signer for browser POST policies
"""

import base64
import binascii
import hashlib
import hmac
import json
from functools import lru_cache
from typing import Any, Callable, Mapping, Optional

from .credentials import SERVICE, TERMINATOR, Credentials, current_time, format_date
from .models import SignedPolicy


def _hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode(), hashlib.sha256).digest()


@lru_cache(maxsize=64)
def derive_signing_key(secret_key: str, datestamp: str, region: str, service: str = SERVICE) -> bytes:
    """
    Derive the scoped signing key for AWS Signature V4.

    Each link keys the next HMAC with the raw digest of the previous one.
    The result is cached in memory per (secret, date, region) and must never
    be logged or persisted.
    """
    k_date = _hmac_sha256(f"AWS4{secret_key}".encode(), datestamp)
    k_region = _hmac_sha256(k_date, region)
    k_service = _hmac_sha256(k_region, service)
    k_signing = _hmac_sha256(k_service, TERMINATOR)

    return k_signing


def sign_string(signing_key: bytes, message: str) -> str:
    """Lowercase hex HMAC-SHA256 of message."""
    return hmac.new(signing_key, message.encode(), hashlib.sha256).hexdigest()


def _unwrap(value: str) -> str:
    # MIME-style encoders split base64 across lines.
    return "".join(value.split())


def is_encoded_policy(value: str) -> bool:
    """True if value is strict base64 (line wrapping allowed) of a JSON document."""
    try:
        json.loads(base64.b64decode(_unwrap(value), validate=True))
    except (binascii.Error, ValueError):
        return False
    return True


def encode_policy(policy: Any) -> str:
    """
    Return the base64 form of a policy.

    Accepts an already encoded policy (returned unchanged), a raw JSON
    string or bytes, or a mapping which is serialized first.
    """
    if isinstance(policy, Mapping):
        policy = json.dumps(policy, separators=(",", ":"))
    if isinstance(policy, str):
        if is_encoded_policy(policy):
            return _unwrap(policy)
        policy = policy.encode("utf-8")
    if not isinstance(policy, (bytes, bytearray)):
        raise TypeError(f"Unsupported policy type: {type(policy).__name__}")
    return base64.b64encode(policy).decode("ascii")


class Signature:
    """
    Signs a POST policy with a region-scoped AWS Signature V4 key.

    `policy` is either an object with a `generate()` method returning the
    base64 document (such as Policy), or a raw/encoded policy value.
    """

    def __init__(
        self,
        secret_key: str,
        region: str,
        policy: Any,
        signing_time: Optional[int] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self._secret_key = secret_key
        self.region = region
        self.policy = policy
        self._clock = clock or current_time
        self.signing_time = int(signing_time) if signing_time is not None else None

    def __repr__(self) -> str:
        return f"Signature(region={self.region!r}, signing_time={self.signing_time!r})"

    def encoded_policy(self) -> str:
        generate = getattr(self.policy, "generate", None)
        if callable(generate):
            return generate()
        return encode_policy(self.policy)

    def generate(self) -> str:
        """
        Hex signature of the policy for the captured signing time.

        Without a captured signing time the clock is read on each call.
        """
        signing_time = self.signing_time if self.signing_time is not None else self._clock()
        signing_key = derive_signing_key(
            self._secret_key, format_date(signing_time), self.region
        )
        return sign_string(signing_key, self.encoded_policy())

    def sign(self, access_key: str) -> SignedPolicy:
        """
        Sign the policy using the current time rather than the captured one.

        Repeated calls read the clock each time, so credential, datetime and
        signature may differ between calls.
        """
        credentials = Credentials.derive(access_key, self.region, self._clock())
        policy = self.encoded_policy()
        signing_key = derive_signing_key(self._secret_key, credentials.date, self.region)
        return SignedPolicy(
            credential=credentials.amz_credential(),
            datetime=credentials.amz_date,
            signature=sign_string(signing_key, policy),
            policy=policy,
        )
