"""
Upload constraints for browser POST uploads
"""

from dataclasses import dataclass, field, fields, replace
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional

from .error import InvalidACLException, InvalidOptionsException


CANNED_ACLS = frozenset({
    "private",
    "public-read",
    "public-read-write",
    "aws-exec-read",
    "authenticated-read",
    "bucket-owner-read",
    "bucket-owner-full-control",
    "log-delivery-write",
})

# Form fields emitted by the client itself, in rendering order.
RESERVED_INPUTS = (
    "Content-Type",
    "acl",
    "success_action_redirect",
    "success_action_status",
    "policy",
    "X-amz-credential",
    "X-amz-algorithm",
    "X-amz-date",
    "X-amz-signature",
    "key",
)

_RESERVED_LOWER = frozenset(name.lower() for name in RESERVED_INPUTS)


@dataclass
class Options:
    """
    Constraints applied to a signed upload form.

    Values are validated on construction and on every merge. `merge` is
    the only supported way to change an Options after construction.

    Example:
        options = Options(content_type="application/pdf", acl="private")
        options.merge({"default_filename": "docs/${filename}"})
    """
    content_type: str = "image/*"
    acl: str = "public-read"
    success_action_redirect: Optional[str] = None
    success_action_status: Optional[str] = "201"
    default_filename: str = "${filename}"
    expires: timedelta = timedelta(minutes=5)
    max_file_size: Optional[int] = None
    additional_inputs: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.acl not in CANNED_ACLS:
            raise InvalidACLException(self.acl)

        if not isinstance(self.content_type, str):
            raise InvalidOptionsException("Option 'content_type' must be a string.")
        if not isinstance(self.default_filename, str):
            raise InvalidOptionsException("Option 'default_filename' must be a string.")
        if self.success_action_redirect is not None and not isinstance(self.success_action_redirect, str):
            raise InvalidOptionsException("Option 'success_action_redirect' must be a string or None.")

        if isinstance(self.expires, (int, float)) and not isinstance(self.expires, bool):
            self.expires = timedelta(seconds=self.expires)
        if not isinstance(self.expires, timedelta) or self.expires.total_seconds() <= 0:
            raise InvalidOptionsException("Option 'expires' must be a positive duration.")

        if self.success_action_status is not None:
            self.success_action_status = str(self.success_action_status)

        if self.max_file_size is not None:
            if isinstance(self.max_file_size, bool) or not isinstance(self.max_file_size, int) or self.max_file_size <= 0:
                raise InvalidOptionsException("Option 'max_file_size' must be a positive number of megabytes.")

        if not isinstance(self.additional_inputs, Mapping):
            raise InvalidOptionsException("Option 'additional_inputs' must be a mapping.")
        if not all(isinstance(name, str) for name in self.additional_inputs):
            raise InvalidOptionsException("Option 'additional_inputs' keys must be strings.")
        collisions = [name for name in self.additional_inputs if name.lower() in _RESERVED_LOWER]
        if collisions:
            raise InvalidOptionsException(
                f"Additional inputs collide with reserved form fields: {', '.join(collisions)}."
            )
        # Copy so later changes to the caller's dict don't leak into a signed policy.
        self.additional_inputs = {
            name: str(value) for name, value in self.additional_inputs.items()
        }

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "Options":
        """Build Options from a flat mapping of overrides."""
        _check_known_keys(options)
        return cls(**options)

    def merge(self, options: Optional[Mapping[str, Any]] = None) -> "Options":
        """
        Overlay the given keys onto this Options in place.

        Keys absent from `options` keep their current values. The merge is
        shallow: `additional_inputs` is replaced as a whole, so to add a
        single extra field pass the existing mapping plus the new entry:

            options.merge({
                "additional_inputs": {**options.additional_inputs, "x-amz-meta-tag": "a"},
            })

        The merged result is validated before anything is changed; a failed
        merge leaves this Options untouched.
        """
        if options is None:
            return self
        if not isinstance(options, Mapping):
            raise InvalidOptionsException("Options to merge must be a mapping.")
        if not options:
            return self

        _check_known_keys(options)
        merged = replace(self, **options)
        for f in fields(self):
            setattr(self, f.name, getattr(merged, f.name))
        return self

    def copy(self) -> "Options":
        """Return an independent copy of these options."""
        return replace(self)

    def as_dict(self) -> Dict[str, Any]:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values["additional_inputs"] = dict(self.additional_inputs)
        return values


def _check_known_keys(options: Mapping[str, Any]) -> None:
    known = {f.name for f in fields(Options)}
    unknown = [str(key) for key in options if key not in known]
    if unknown:
        raise InvalidOptionsException(f"Unknown options: {', '.join(sorted(unknown))}.")


def normalize_options(options: Any = None) -> Options:
    """
    Turn None, a mapping of overrides, or an Options into an Options.

    An Options instance is returned as-is, not copied.

    Raises:
        InvalidOptionsException: options is of any other kind, or names an
            unknown option.
        InvalidACLException: the acl override is not a canned ACL.
    """
    if options is None:
        return Options()
    if isinstance(options, Options):
        return options
    if isinstance(options, Mapping):
        return Options.from_mapping(options)
    raise InvalidOptionsException()
