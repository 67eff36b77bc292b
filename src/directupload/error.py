"""
Exception classes for the direct upload signer
"""


class DirectUploadException(Exception):
    """
    Base exception for all direct upload errors.
    """

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class InvalidRegionException(DirectUploadException):
    """Thrown when the region is not a recognized S3 region."""

    def __init__(self, region: str):
        super().__init__(
            f"Region '{region}' is not a valid S3 region.",
            error_code="InvalidRegion"
        )
        self.region = region


class InvalidACLException(DirectUploadException):
    """Thrown when the ACL is not one of the canned S3 ACLs."""

    def __init__(self, acl: str):
        super().__init__(
            f"ACL '{acl}' is not a valid canned ACL.",
            error_code="InvalidACL"
        )
        self.acl = acl


class InvalidOptionsException(DirectUploadException):
    """Thrown when upload options are malformed."""

    def __init__(self, message: str = "Options must be None, a mapping or an Options instance."):
        super().__init__(message, error_code="InvalidOptions")
