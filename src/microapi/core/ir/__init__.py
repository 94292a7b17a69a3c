"""
MicroAPI Intermediate Representation (IR) types.

The declaration graph supplied by the host, the descriptors resolved
from it, and the target-neutral generated declarations. All types are
frozen pydantic models and are re-exported from this package.
"""

# Declarations
from .declarations import (
    EQUALITY_CONTRACT,
    Declaration,
    DeclarationKind,
    GraphDocument,
    Member,
    MemberKind,
    Parameter,
)

# Descriptors
from .descriptors import (
    BoundParameter,
    DtoDescriptor,
    FacadeDescriptor,
    HttpVerb,
    OperationDescriptor,
    ParameterBinding,
    RequestEnvelopeDescriptor,
)

# Diagnostics
from .diagnostics import DIAGNOSTIC_TITLES, Diagnostic, DiagnosticCode, Severity

# Generated declarations
from .generated import (
    ENVELOPE_PARAMETER,
    SERVICE_PARAMETER,
    CallArgument,
    ControllerDeclaration,
    DtoDeclaration,
    GeneratedMethod,
    GeneratedParameter,
    GeneratedProperty,
    ParameterSource,
)
from .location import SourceLocation

# Types
from .types import (
    ContainerType,
    NamedType,
    NullableType,
    PrimitiveType,
    TypeDescriptor,
    declared_name,
    is_nullable,
    strip_nullable,
)

# Annotation values
from .values import (
    Annotation,
    ArrayValue,
    BoolValue,
    CharValue,
    EnumLiteralValue,
    NullValue,
    PrimitiveValue,
    StringValue,
    TypeRefValue,
    Value,
    simple_annotation_name,
    strip_generic_suffix,
)

__all__ = [
    # Types
    "TypeDescriptor",
    "PrimitiveType",
    "NamedType",
    "NullableType",
    "ContainerType",
    "strip_nullable",
    "is_nullable",
    "declared_name",
    # Values
    "Value",
    "NullValue",
    "StringValue",
    "BoolValue",
    "CharValue",
    "PrimitiveValue",
    "TypeRefValue",
    "EnumLiteralValue",
    "ArrayValue",
    "Annotation",
    "simple_annotation_name",
    "strip_generic_suffix",
    # Declarations
    "Declaration",
    "DeclarationKind",
    "Member",
    "MemberKind",
    "Parameter",
    "GraphDocument",
    "EQUALITY_CONTRACT",
    "SourceLocation",
    # Descriptors
    "HttpVerb",
    "ParameterBinding",
    "BoundParameter",
    "RequestEnvelopeDescriptor",
    "OperationDescriptor",
    "FacadeDescriptor",
    "DtoDescriptor",
    # Generated
    "ParameterSource",
    "GeneratedParameter",
    "CallArgument",
    "GeneratedMethod",
    "ControllerDeclaration",
    "GeneratedProperty",
    "DtoDeclaration",
    "ENVELOPE_PARAMETER",
    "SERVICE_PARAMETER",
    # Diagnostics
    "Severity",
    "DiagnosticCode",
    "Diagnostic",
    "DIAGNOSTIC_TITLES",
]
