"""Schema document checks using the jsonschema library."""

import jsonschema

from schemaview.errors.exceptions import SchemaDocumentError


def schema_document_issues(schema_data: dict) -> list[str]:
    """Return every draft-03 metaschema violation in *schema_data*.

    Args:
        schema_data: A schema document (already decoded JSON).

    Returns:
        Human-readable issues, empty when the document is well formed.
    """
    meta_validator = jsonschema.Draft3Validator(jsonschema.Draft3Validator.META_SCHEMA)
    issues = []
    for error in sorted(meta_validator.iter_errors(schema_data), key=lambda e: list(e.path)):
        location = "/".join(str(p) for p in error.path) or "<root>"
        issues.append(f"{location}: {error.message}")
    return issues


def check_schema_document(schema_data: dict, uri: str | None = None) -> None:
    """Raise SchemaDocumentError if *schema_data* is not a valid draft-03 schema.

    Raises:
        SchemaDocumentError: With the full issue list in `details`.
    """
    if not isinstance(schema_data, dict):
        raise SchemaDocumentError(
            f"Schema document must be an object, got {type(schema_data).__name__}",
            details=[],
        )
    issues = schema_document_issues(schema_data)
    if issues:
        raise SchemaDocumentError(
            f"Schema document {uri or '<anonymous>'} is invalid: {issues[0]}",
            details=issues,
        )
