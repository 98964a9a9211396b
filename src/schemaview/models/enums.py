"""String enums for the JSON Schema vocabulary understood by schemaview."""

from enum import StrEnum


class JsonType(StrEnum):
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"
    ANY = "any"


class StringFormat(StrEnum):
    BYTE = "byte"
    DATE_TIME = "date-time"
    URL = "url"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"


class AdditionalPropertiesMode(StrEnum):
    DISALLOWED = "disallowed"
    UNRESTRICTED = "unrestricted"
    SCHEMA = "schema"
