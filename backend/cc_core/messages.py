"""Typed request messages for package operations.

Messages are built from request parameters and validate themselves before a
handler touches the database. ``validate()`` returns ``Valid`` or ``Invalid``;
an ``Invalid`` result carries every violation found, not just the first.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .errors import ValidationFailed
from .models import Package

VALID_PACKAGE_TYPES = (Package.BITS, Package.DOCKER)

MISSING_ARTIFACT = "An application zip file must be uploaded."
TYPE_REQUIRED = "The type field is required"
TYPE_INVALID = "The type field needs to be one of '{}'".format(", ".join(VALID_PACKAGE_TYPES))
URL_NOT_ALLOWED_FOR_BITS = "The url field cannot be provided when type is bits."
URL_REQUIRED_FOR_DOCKER = "The url field must be provided for type docker."


@dataclass(frozen=True)
class Valid:
    value: Any = None

    @property
    def ok(self) -> bool:
        return True

    @property
    def errors(self) -> List[str]:
        return []


@dataclass(frozen=True)
class Invalid:
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False


ValidationResult = Union[Valid, Invalid]


@dataclass(frozen=True)
class BitsSpec:
    pass


@dataclass(frozen=True)
class DockerSpec:
    url: str


PackageSpec = Union[BitsSpec, DockerSpec]


def initial_state(spec: PackageSpec) -> str:
    if isinstance(spec, BitsSpec):
        return Package.CREATED_STATE
    if isinstance(spec, DockerSpec):
        return Package.READY_STATE
    raise TypeError(f"unknown package spec: {spec!r}")


def accepts_uploads(spec: PackageSpec) -> bool:
    if isinstance(spec, BitsSpec):
        return True
    if isinstance(spec, DockerSpec):
        return False
    raise TypeError(f"unknown package spec: {spec!r}")


def spec_for(package: Package) -> PackageSpec:
    if package.type == Package.BITS:
        return BitsSpec()
    if package.type == Package.DOCKER:
        return DockerSpec(url=package.url or "")
    raise TypeError(f"unknown package type: {package.type!r}")


class PackageUploadMessage:
    def __init__(self, package_guid: str, opts: Dict[str, Any]):
        self.package_guid = package_guid
        self.package_path: Optional[str] = opts.get("bits_path")

    def validate(self) -> ValidationResult:
        if not self.package_path:
            return Invalid([MISSING_ARTIFACT])
        return Valid(self.package_path)


class PackageCreateMessage:
    def __init__(self, app_guid: str, opts: Dict[str, Any]):
        self.app_guid = app_guid
        self.type = opts.get("type")
        self.url = opts.get("url")

    def validate(self) -> ValidationResult:
        errors = [self._validate_type_field(), self._validate_url()]
        errors = [error for error in errors if error]
        if errors:
            return Invalid(errors)
        if self.type == Package.BITS:
            return Valid(BitsSpec())
        return Valid(DockerSpec(url=self.url))

    def package_spec(self) -> PackageSpec:
        result = self.validate()
        if not result.ok:
            raise ValidationFailed(result.errors)
        return result.value

    def _validate_type_field(self) -> Optional[str]:
        if self.type is None:
            return TYPE_REQUIRED
        if self.type not in VALID_PACKAGE_TYPES:
            return TYPE_INVALID
        return None

    def _validate_url(self) -> Optional[str]:
        if self.type == Package.BITS and self.url is not None:
            return URL_NOT_ALLOWED_FOR_BITS
        if self.type == Package.DOCKER and self.url is None:
            return URL_REQUIRED_FOR_DOCKER
        return None
