"""
metadata/validator.py — JSON Schema validation for formrules field configuration files.

Usage:
    from formrules.metadata.validator import validate_config_file

    issues = validate_config_file(Path("forms/signup.yaml"), registry=validator.registry)
    for issue in issues:
        print(issue)

Schema errors are reported as ``error`` issues. When a registry is given, rule
references naming unregistered rules are reported as ``warning`` issues: the
engine skips them at validation time, so they never block a form.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from formrules.registry import RuleRegistry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------

_SCHEMAS_DIR = Path(__file__).parent / "schemas"

FIELDS_SCHEMA = "fields.schema.json"


@dataclass
class ConfigIssue:
    """A single validation finding for a field configuration file."""

    file: Path
    message: str
    path: str = ""           # Location within the document, e.g. "fields/email/rules[1]"
    severity: str = "error"  # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema(name: str) -> dict[str, Any]:
    schema_path = _SCHEMAS_DIR / name
    with schema_path.open() as fh:
        return json.load(fh)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _rule_name(reference: Any) -> str | None:
    if isinstance(reference, str):
        return reference
    if isinstance(reference, dict) and isinstance(reference.get("name"), str):
        return reference["name"]
    return None


def _unknown_rule_issues(
    path: Path, doc: dict[str, Any], registry: RuleRegistry
) -> list[ConfigIssue]:
    issues: list[ConfigIssue] = []
    for field_name, config in (doc.get("fields") or {}).items():
        for index, reference in enumerate(config.get("rules") or []):
            name = _rule_name(reference)
            if name is not None and not registry.is_registered(name):
                issues.append(
                    ConfigIssue(
                        file=path,
                        message=f"Unknown rule '{name}' will be skipped during validation",
                        path=f"fields/{field_name}/rules[{index}]",
                        severity="warning",
                    )
                )
    return issues


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_config_document(
    doc: Any,
    path: Path,
    *,
    registry: RuleRegistry | None = None,
) -> list[ConfigIssue]:
    """Validate an already-parsed configuration document."""
    validator = Draft202012Validator(_load_schema(FIELDS_SCHEMA))

    issues = [
        ConfigIssue(file=path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=_json_path)
    ]

    # Rule names are only meaningful once the document's shape is right
    if not issues and registry is not None:
        issues.extend(_unknown_rule_issues(path, doc, registry))

    return issues


def validate_config_file(
    path: Path,
    *,
    registry: RuleRegistry | None = None,
    strict: bool = False,
) -> list[ConfigIssue]:
    """
    Validate a YAML field configuration file against the JSON Schema.

    Args:
        path:     Path to the YAML file to validate.
        registry: Registry used to flag unknown rule names as warnings.
        strict:   If ``True``, warnings are escalated to errors.

    Returns:
        A list of :class:`ConfigIssue` objects (empty on success).
    """
    try:
        with path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [ConfigIssue(file=path, message=f"YAML parse error: {exc}")]

    if raw is None:
        return [ConfigIssue(file=path, message="File is empty or contains only whitespace")]

    issues = validate_config_document(raw, path, registry=registry)
    if strict:
        for issue in issues:
            if issue.severity == "warning":
                issue.severity = "error"

    logger.debug("Validated %s: %d issue(s)", path, len(issues))
    return issues
