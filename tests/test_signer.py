import base64
import hashlib
import hmac
import itertools
import json

import pytest

from directupload._signer import (
    Signature,
    _hmac_sha256,
    derive_signing_key,
    encode_policy,
    is_encoded_policy,
    sign_string,
)
from directupload.error import InvalidRegionException


# Example key from the AWS Signature V4 documentation ("Deriving the signing key")
DOC_SECRET_KEY = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"
DOC_DATE = "20120215"
DOC_REGION = "us-east-1"

SIGNING_TIME = 1451350923  # 2015-12-29T01:02:03Z
RAW_POLICY = '{"expiration":"2015-12-30T12:00:00Z","conditions":[{"bucket":"my-bucket"}]}'


def _reference_signature(secret: str, date: str, region: str, message: str) -> str:
    key = f"AWS4{secret}".encode()
    for part in (date, region, "s3", "aws4_request"):
        key = hmac.new(key, part.encode(), hashlib.sha256).digest()
    return hmac.new(key, message.encode(), hashlib.sha256).hexdigest()


def test_signing_key_links_match_aws_documentation():
    k_date = _hmac_sha256(f"AWS4{DOC_SECRET_KEY}".encode(), DOC_DATE)
    assert k_date.hex() == "969fbb94feb542b71ede6f87fe4d5fa29c789342b0f407474670f0c2489e0a0d"

    k_region = _hmac_sha256(k_date, DOC_REGION)
    assert k_region.hex() == "69daa0209cd9c5ff5c8ced464a696fd4252e981430b10e3d3fd8e2f197d7a70c"

    k_service = _hmac_sha256(k_region, "iam")
    assert k_service.hex() == "f72cfd46f26bc4643f06a85eea3e72ea35a7d2ba8e8faaa6afda2c07cbdcea55"

    signing_key = derive_signing_key(DOC_SECRET_KEY, DOC_DATE, DOC_REGION, "iam")
    assert signing_key.hex() == "f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d"


def test_signing_key_is_raw_bytes_and_deterministic():
    first = derive_signing_key("secret", "20151229", "us-east-1")
    second = derive_signing_key("secret", "20151229", "us-east-1")

    assert isinstance(first, bytes)
    assert len(first) == 32
    assert first == second
    assert derive_signing_key("secret", "20151229", "eu-west-1") != first


def test_sign_string_is_lowercase_hex():
    signature = sign_string(derive_signing_key("secret", "20151229", "us-east-1"), "policy")

    assert len(signature) == 64
    assert signature == signature.lower()
    assert all(c in "0123456789abcdef" for c in signature)


def test_generate_matches_reference_chain():
    encoded = encode_policy(RAW_POLICY)
    signature = Signature("secret", "us-east-1", encoded, signing_time=SIGNING_TIME)

    assert signature.generate() == _reference_signature("secret", "20151229", "us-east-1", encoded)
    assert signature.generate() == signature.generate()


def test_generate_reads_policy_provider_each_time():
    class CountingPolicy:
        calls = 0

        def generate(self):
            self.calls += 1
            return encode_policy({"n": self.calls})

    policy = CountingPolicy()
    signature = Signature("secret", "us-east-1", policy, signing_time=SIGNING_TIME)

    assert signature.generate() != signature.generate()
    assert policy.calls == 2


def test_encode_policy_detects_encoded_input():
    encoded = base64.b64encode(RAW_POLICY.encode()).decode()

    assert is_encoded_policy(encoded)
    assert not is_encoded_policy(RAW_POLICY)
    assert encode_policy(encoded) == encoded
    assert encode_policy(RAW_POLICY) == encoded
    assert encode_policy(RAW_POLICY.encode()) == encoded


def test_encode_policy_treats_base64_of_non_json_as_raw():
    # "abcd" decodes as base64 but not to a JSON document
    assert not is_encoded_policy("abcd")
    assert encode_policy("abcd") == base64.b64encode(b"abcd").decode()


def test_line_wrapped_encoding_is_unwrapped_not_reencoded():
    encoded = base64.b64encode(RAW_POLICY.encode()).decode()
    wrapped = base64.encodebytes(RAW_POLICY.encode()).decode()
    crlf_wrapped = "\r\n".join(encoded[i:i + 76] for i in range(0, len(encoded), 76)) + "\r\n"

    assert "\n" in wrapped.rstrip("\n")
    assert is_encoded_policy(wrapped)
    assert encode_policy(wrapped) == encoded
    assert encode_policy(crlf_wrapped) == encoded


def test_sign_wrapped_and_raw_policies_agree():
    clock = lambda: SIGNING_TIME
    wrapped = base64.encodebytes(RAW_POLICY.encode()).decode()

    from_wrapped = Signature("secret", "us-east-1", wrapped, clock=clock).sign("AKIAEXAMPLE")
    from_raw = Signature("secret", "us-east-1", RAW_POLICY, clock=clock).sign("AKIAEXAMPLE")

    assert from_wrapped.signature == from_raw.signature
    assert from_wrapped.policy == from_raw.policy


def test_encode_policy_serializes_mappings():
    encoded = encode_policy({"expiration": "2015-12-30T12:00:00Z", "conditions": []})

    assert json.loads(base64.b64decode(encoded)) == {
        "expiration": "2015-12-30T12:00:00Z",
        "conditions": [],
    }


def test_encode_policy_rejects_unsupported_types():
    with pytest.raises(TypeError):
        encode_policy(42)


def test_sign_raw_and_encoded_policies_agree():
    clock = lambda: SIGNING_TIME
    encoded = base64.b64encode(RAW_POLICY.encode()).decode()

    raw = Signature("secret", "us-east-1", RAW_POLICY, clock=clock).sign("AKIAEXAMPLE")
    pre_encoded = Signature("secret", "us-east-1", encoded, clock=clock).sign("AKIAEXAMPLE")

    assert raw.signature == pre_encoded.signature
    assert raw.policy == encoded
    assert raw.credential == "AKIAEXAMPLE/20151229/us-east-1/s3/aws4_request"
    assert raw.datetime == "20151229T010203Z"


def test_sign_samples_clock_per_call():
    ticks = itertools.count(SIGNING_TIME, 86400)
    signature = Signature("secret", "us-east-1", RAW_POLICY, clock=lambda: next(ticks))

    first = signature.sign("AKIAEXAMPLE")
    second = signature.sign("AKIAEXAMPLE")

    assert first.datetime == "20151229T010203Z"
    assert second.datetime == "20151230T010203Z"
    assert first.credential != second.credential
    assert first.signature != second.signature


def test_sign_validates_region():
    signature = Signature("secret", "mars-central-1", RAW_POLICY, signing_time=SIGNING_TIME)

    with pytest.raises(InvalidRegionException):
        signature.sign("AKIAEXAMPLE")


def test_repr_hides_secret():
    signature = Signature("super-secret", "us-east-1", RAW_POLICY, signing_time=SIGNING_TIME)

    assert "super-secret" not in repr(signature)
