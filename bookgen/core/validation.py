"""Loading and checking of syllabus, topic, and config files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, Type

import yaml
from pydantic import BaseModel, ValidationError

from .errors import ValidationFailure

YAML_SUFFIXES = {".yaml", ".yml"}


@dataclass
class ValidationResult:
    """Outcome of one check: errors make it invalid, warnings do not."""

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    data: Any = None

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ValidationFailure(self.errors)


def _decode_json(text: str) -> Tuple[Any, List[str]]:
    return json.loads(text), []


def _decode_yaml(text: str) -> Tuple[Any, List[str]]:
    data = yaml.safe_load(text)
    if data is None:
        return {}, ["contains only null/empty data"]
    return data, []


_DECODERS: Dict[str, Tuple[Callable[[str], Tuple[Any, List[str]]], Tuple[Type[Exception], ...]]] = {
    "JSON": (_decode_json, (json.JSONDecodeError,)),
    "YAML": (_decode_yaml, (yaml.YAMLError,)),
}


class ValidationFramework:
    """Checks inputs before the pipeline touches them.

    A strict instance raises :class:`ValidationFailure` on the first invalid
    result; a lenient one logs and hands the result back to the caller.
    """

    def __init__(self, *, strict: bool = True):
        self.strict = strict
        self.logger = logging.getLogger(__name__)

    def _finish(self, result: ValidationResult, label: str) -> ValidationResult:
        if not result.valid:
            self.logger.error("%s validation failed: %s", label, result.errors)
        elif result.has_warnings:
            self.logger.warning("%s validation warnings: %s", label, result.warnings)
        if self.strict:
            result.raise_if_invalid()
        return result

    def validate_file_exists(self, path: Path | str) -> ValidationResult:
        path_obj = Path(path)
        errors: List[str] = []
        warnings: List[str] = []

        if not path_obj.exists():
            errors.append(f"File does not exist: {path}")
        elif not path_obj.is_file():
            errors.append(f"Path is not a file: {path}")
        elif not path_obj.stat().st_size:
            warnings.append(f"File is empty: {path}")

        return self._finish(
            ValidationResult(valid=not errors, errors=errors, warnings=warnings, data=None if errors else path_obj),
            "File",
        )

    def _load(self, path: Path | str, kind: str) -> ValidationResult:
        checked = self.validate_file_exists(path)
        if not checked.valid:
            return checked

        decode, decode_errors = _DECODERS[kind]
        text = Path(path).read_text(encoding="utf-8")
        if not text.strip():
            result = ValidationResult(valid=False, errors=[f"{kind} file is empty: {path}"])
        else:
            try:
                data, notes = decode(text)
            except decode_errors as exc:
                result = ValidationResult(valid=False, errors=[f"Invalid {kind} in {path}: {exc}"])
            else:
                self.logger.debug("Loaded %s from %s", kind, path)
                warnings = [f"{kind} file {note}: {path}" for note in notes]
                result = ValidationResult(valid=True, warnings=warnings, data=data)
        return self._finish(result, kind)

    def validate_json_file(self, path: Path | str) -> ValidationResult:
        return self._load(path, "JSON")

    def validate_yaml_file(self, path: Path | str) -> ValidationResult:
        return self._load(path, "YAML")

    def load_structured_file(self, path: Path | str) -> ValidationResult:
        """Load ``.yaml``/``.yml`` as YAML and anything else as JSON."""
        kind = "YAML" if Path(path).suffix.lower() in YAML_SUFFIXES else "JSON"
        return self._load(path, kind)

    def validate_pydantic_model(self, data: Dict[str, Any], model_class: Type[BaseModel]) -> ValidationResult:
        """Validate ``data`` and flatten pydantic errors to ``loc.path: message`` strings."""
        try:
            validated = model_class.model_validate(data)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
            ]
            return self._finish(ValidationResult(valid=False, errors=errors), model_class.__name__)
        return self._finish(ValidationResult(valid=True, data=validated), model_class.__name__)


validation = ValidationFramework(strict=False)
strict_validation = ValidationFramework(strict=True)


__all__ = [
    "ValidationFailure",
    "ValidationFramework",
    "ValidationResult",
    "strict_validation",
    "validation",
]
