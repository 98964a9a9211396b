"""Custom exception classes for schemaview."""


class SchemaViewError(Exception):
    """Base exception for schemaview."""

    def __init__(self, code: str, message: str, details=None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


class UnresolvedReferenceError(SchemaViewError):
    """A `$ref` or `extends` target has not been compiled yet."""

    def __init__(self, reference: str, resolved_uri: str | None = None, message: str | None = None):
        self.reference = reference
        self.resolved_uri = resolved_uri
        super().__init__(
            "UNRESOLVED_REFERENCE",
            message or f"Could not find schema: {resolved_uri or reference}",
            details={"reference": reference, "resolved_uri": resolved_uri},
        )


class TypeMismatchError(SchemaViewError, TypeError):
    """A value does not match the expected kind or format."""

    def __init__(self, observed: str, expected: str, message: str | None = None):
        self.observed = observed
        self.expected = expected
        super().__init__(
            "TYPE_MISMATCH",
            message or f"Expected {expected}, got {observed}.",
            details={"observed": observed, "expected": expected},
        )


class UnknownPropertyError(SchemaViewError, AttributeError):
    """Property name is neither declared nor allowed as an additional property."""

    def __init__(self, name: str, schema_uri: str | None = None):
        super().__init__(
            "UNKNOWN_PROPERTY",
            f"Schema {schema_uri or '<anonymous>'} has no property '{name}'",
            details={"name": name, "schema_uri": schema_uri},
        )
        # AttributeError.__init__ resets `name`.
        self.name = name


class SchemaDocumentError(SchemaViewError):
    """Schema document failed the metaschema check."""

    def __init__(self, message: str, details=None):
        super().__init__("INVALID_SCHEMA", message, details)
