"""Tests for annotation reading and literal formatting."""

import pytest

from microapi.core.errors import ResolutionError
from microapi.core.ir import (
    Annotation,
    ArrayValue,
    BoolValue,
    CharValue,
    EnumLiteralValue,
    NamedType,
    NullValue,
    PrimitiveValue,
    StringValue,
    TypeRefValue,
)
from microapi.synth.annotations import (
    PYTHON_LITERALS,
    AnnotationReader,
    find_marker,
    format_arguments,
    format_value,
    matches_marker,
)


def type_ref(name: str) -> TypeRefValue:
    return TypeRefValue(type=NamedType(name=name))


# =============================================================================
# Marker matching
# =============================================================================


class TestMarkers:
    @pytest.mark.parametrize(
        "kind", ["Dto", "DtoAttribute", "MicroAPI.DtoAttribute", "Dto<Shop.User>", "DtoAttribute`1"]
    )
    def test_matches_by_simple_name(self, kind):
        assert matches_marker(Annotation(kind=kind), {"Dto"})

    def test_does_not_match_other_names(self):
        assert not matches_marker(Annotation(kind="MicroAPI.DtoMapAttribute"), {"Dto"})

    def test_find_marker_returns_first(self):
        annotations = (
            Annotation(kind="Obsolete"),
            Annotation(kind="Get", positional=(StringValue(value="a"),)),
            Annotation(kind="Post"),
        )

        assert find_marker(annotations, {"Get", "Post"}) is annotations[1]
        assert find_marker(annotations, {"Put"}) is None


# =============================================================================
# AnnotationReader
# =============================================================================


class TestAnnotationReader:
    @pytest.fixture
    def reader(self) -> AnnotationReader:
        return AnnotationReader(
            Annotation(
                kind="Dto",
                positional=(type_ref("Shop.User"), NullValue()),
                named={
                    "IgnoredProperties": ArrayValue(
                        items=(StringValue(value="Id"), NullValue(), StringValue(value=""))
                    ),
                    "IgnoredAttributes": ArrayValue(items=(type_ref("Shop.SecretAttribute"),)),
                    "Empty": ArrayValue(),
                    "Route": StringValue(value="{id}"),
                    "Flag": BoolValue(value=True),
                },
            )
        )

    def test_positional_type(self, reader):
        assert reader.type(0) == NamedType(name="Shop.User")

    def test_null_reads_as_absent(self, reader):
        assert reader.value(1) is None
        assert reader.string(1) is None

    def test_missing_reads_as_absent(self, reader):
        assert reader.string(5) is None
        assert reader.string("MethodName") is None

    def test_named_string(self, reader):
        assert reader.string("Route") == "{id}"

    def test_char_reads_as_string(self):
        reader = AnnotationReader(Annotation(kind="X", positional=(CharValue(value="c"),)))
        assert reader.string(0) == "c"

    def test_strings_drop_nulls_and_empties(self, reader):
        assert reader.strings("IgnoredProperties") == ("Id",)

    def test_types(self, reader):
        assert reader.types("IgnoredAttributes") == (NamedType(name="Shop.SecretAttribute"),)

    def test_empty_array_reads_as_absent(self, reader):
        assert reader.array("Empty") is None
        assert reader.strings("Empty") == ()
        assert reader.types("Missing") == ()

    def test_wrong_kind_raises(self, reader):
        with pytest.raises(ResolutionError, match="expected a string"):
            reader.string("Flag")
        with pytest.raises(ResolutionError, match="expected a type reference"):
            reader.type("Route")
        with pytest.raises(ResolutionError, match="expected an array"):
            reader.array("Route")
        with pytest.raises(ResolutionError, match="expected strings"):
            reader.strings("IgnoredAttributes")


# =============================================================================
# Literal formatting
# =============================================================================


class TestFormatValue:
    def test_null(self):
        assert format_value(NullValue()) == "null"

    def test_booleans(self):
        assert format_value(BoolValue(value=True)) == "true"
        assert format_value(BoolValue(value=False)) == "false"

    def test_string_is_quoted_and_escaped(self):
        assert format_value(StringValue(value="admin")) == '"admin"'
        assert format_value(StringValue(value='say "hi"')) == '"say \\"hi\\""'
        assert format_value(StringValue(value="C:\\temp")) == '"C:\\\\temp"'

    def test_char(self):
        assert format_value(CharValue(value="x")) == "'x'"
        assert format_value(CharValue(value="'")) == "'\\''"

    def test_type_reference(self):
        assert format_value(type_ref("Shop.User")) == "typeof(Shop.User)"

    def test_array(self):
        value = ArrayValue(items=(StringValue(value="a"), StringValue(value="b")))
        assert format_value(value) == 'new[] {"a", "b"}'

    def test_empty_array_formats_to_empty_string(self):
        assert format_value(ArrayValue()) == ""

    def test_other_values_use_literal_text(self):
        assert format_value(PrimitiveValue(value=10)) == "10"
        assert format_value(PrimitiveValue(value=2.5, text="2.5m")) == "2.5m"
        assert format_value(EnumLiteralValue(type="Level", member="High")) == "Level.High"

    def test_python_literals(self):
        assert format_value(NullValue(), PYTHON_LITERALS) == "None"
        assert format_value(BoolValue(value=True), PYTHON_LITERALS) == "True"
        assert format_value(CharValue(value="x"), PYTHON_LITERALS) == '"x"'
        assert format_value(type_ref("Shop.User"), PYTHON_LITERALS) == "Shop.User"
        value = ArrayValue(items=(PrimitiveValue(value=1), PrimitiveValue(value=2)))
        assert format_value(value, PYTHON_LITERALS) == "[1, 2]"


class TestFormatArguments:
    def test_positional_then_named(self):
        annotation = Annotation(
            kind="Range",
            positional=(PrimitiveValue(value=1), PrimitiveValue(value=10)),
            named={"ErrorMessage": StringValue(value="out of range")},
        )

        assert format_arguments(annotation) == ["1", "10", 'ErrorMessage = "out of range"']

    def test_empty_arrays_are_omitted(self):
        annotation = Annotation(
            kind="Tags",
            positional=(ArrayValue(),),
            named={"Names": ArrayValue(), "Primary": BoolValue(value=True)},
        )

        assert format_arguments(annotation) == ["Primary = true"]

    def test_python_named_separator(self):
        annotation = Annotation(kind="Authorize", named={"Roles": StringValue(value="admin")})

        assert format_arguments(annotation, PYTHON_LITERALS) == ['Roles="admin"']
