"""
Credential scope derivation for AWS Signature V4 POST uploads
"""

from dataclasses import dataclass
from datetime import datetime, UTC

from .error import InvalidRegionException


ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "s3"
TERMINATOR = "aws4_request"

AVAILABLE_REGIONS = frozenset({
    "us-east-2",
    "us-east-1",
    "us-west-1",
    "us-west-2",
    "ap-east-1",
    "ap-south-1",
    "ap-northeast-3",
    "ap-northeast-2",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-northeast-1",
    "ca-central-1",
    "cn-north-1",
    "cn-northwest-1",
    "eu-central-1",
    "eu-west-1",
    "eu-west-2",
    "eu-west-3",
    "eu-north-1",
    "me-south-1",
    "sa-east-1",
    "us-gov-east-1",
    "us-gov-west-1",
})


def validate_region(region: str) -> None:
    """Raise InvalidRegionException unless region is in the allow-list."""
    if region not in AVAILABLE_REGIONS:
        raise InvalidRegionException(region)


def current_time() -> int:
    """Current wall-clock time in epoch seconds."""
    return int(datetime.now(UTC).timestamp())


def _utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, UTC)


def format_date(timestamp: int) -> str:
    """Format epoch seconds as the YYYYMMDD credential scope date."""
    return _utc(timestamp).strftime("%Y%m%d")


def format_amz_date(timestamp: int) -> str:
    """Format epoch seconds as an X-amz-date value (YYYYMMDDTHHMMSSZ)."""
    return _utc(timestamp).strftime("%Y%m%dT%H%M%SZ")


def format_iso8601(timestamp: int) -> str:
    """Format epoch seconds as an ISO-8601 UTC policy expiration."""
    return _utc(timestamp).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class Credentials:
    """
    Access key bound to a region and a signing instant.

    Pure derivation, nothing here touches the secret key.
    """
    access_key: str
    region: str
    signing_time: int

    @classmethod
    def derive(cls, access_key: str, region: str, signing_time: int) -> "Credentials":
        """
        Build credentials for a signing session.

        Raises:
            InvalidRegionException: region is not a recognized S3 region.
        """
        validate_region(region)
        return cls(access_key=access_key, region=region, signing_time=int(signing_time))

    @property
    def date(self) -> str:
        return format_date(self.signing_time)

    @property
    def amz_date(self) -> str:
        return format_amz_date(self.signing_time)

    @property
    def scope(self) -> str:
        return f"{self.date}/{self.region}/{SERVICE}/{TERMINATOR}"

    def amz_credential(self) -> str:
        """Value of the X-amz-credential form field."""
        return f"{self.access_key}/{self.scope}"
