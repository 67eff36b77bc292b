"""
POST policy document construction
"""

import base64
import json
import math
import re
from typing import Any, Dict, List

from .credentials import ALGORITHM, Credentials, format_amz_date, format_iso8601
from .options import Options


_PLACEHOLDER_RE = re.compile(r"\$\{[^}]*\}")

_BYTES_PER_MB = 1024 * 1024


class Policy:
    """
    Builds the POST policy for a bucket and signing instant.

    Options are read when the policy is generated, so merging new values
    into the Options object changes the next generated policy.

    Policy document explanation:
    http://docs.aws.amazon.com/AmazonS3/latest/API/sigv4-HTTPPOSTConstructPolicy.html
    """

    def __init__(self, options: Options, credentials: Credentials, bucket: str, signing_time: int):
        self.options = options
        self.credentials = credentials
        self.bucket = bucket
        self.signing_time = int(signing_time)

    def expiration(self) -> str:
        # Sub-second durations round up.
        return format_iso8601(self.signing_time + math.ceil(self.options.expires.total_seconds()))

    def conditions(self) -> List[Any]:
        """Build the ordered condition list."""
        options = self.options
        conditions: List[Any] = [
            {"bucket": self.bucket},
            {"acl": options.acl},
            {"X-amz-credential": self.credentials.amz_credential()},
            {"X-amz-algorithm": ALGORITHM},
            {"X-amz-date": format_amz_date(self.signing_time)},
            self._key_condition(options.default_filename),
            self._content_type_condition(options.content_type),
        ]

        if options.max_file_size is not None:
            conditions.append(["content-length-range", 0, options.max_file_size * _BYTES_PER_MB])

        if options.success_action_redirect is not None:
            conditions.append({"success_action_redirect": options.success_action_redirect})

        if options.success_action_status is not None:
            conditions.append({"success_action_status": options.success_action_status})

        for name, value in options.additional_inputs.items():
            conditions.append({name: value})

        return conditions

    @staticmethod
    def _key_condition(filename: str) -> Any:
        match = _PLACEHOLDER_RE.search(filename)
        if match:
            return ["starts-with", "$key", filename[:match.start()]]
        return {"key": filename}

    @staticmethod
    def _content_type_condition(content_type: str) -> Any:
        if not content_type:
            return ["starts-with", "$Content-Type", ""]
        if content_type.endswith("*"):
            return ["starts-with", "$Content-Type", content_type[:-1]]
        return {"Content-Type": content_type}

    def document(self) -> Dict[str, Any]:
        return {
            "expiration": self.expiration(),
            "conditions": self.conditions(),
        }

    def to_json(self) -> str:
        return json.dumps(self.document(), separators=(",", ":"), ensure_ascii=True)

    def generate(self) -> str:
        """Return the base64 encoded policy document."""
        return base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")
