"""Unit tests for schema construction."""

import pytest

from redisearch_client.schema import (
    DEFAULT_OPTIONS,
    FieldType,
    GeoField,
    NumericField,
    Schema,
    TagField,
    TextField,
    TextFieldOptions,
    new_geo_field,
    new_numeric_field,
    new_sortable_numeric_field,
    new_sortable_text_field,
    new_tag_field,
    new_text_field,
    new_text_field_options,
)


def test_add_field_returns_same_schema_and_keeps_order():
    schema = Schema()
    returned = schema.add_field(new_text_field("foo")).add_field(new_sortable_numeric_field("bar"))

    assert returned is schema
    assert [f.name for f in schema] == ["foo", "bar"]
    assert len(schema) == 2


def test_schema_defaults_to_default_options():
    assert Schema().options is DEFAULT_OPTIONS
    assert DEFAULT_OPTIONS.stopwords is None
    assert DEFAULT_OPTIONS.language is None


def test_schema_lookup_helpers():
    schema = Schema().add_field(new_text_field("title")).add_field(new_geo_field("loc"))

    assert "title" in schema
    assert "missing" not in schema
    assert isinstance(schema.get("loc"), GeoField)
    assert schema.get("missing") is None


def test_add_field_does_not_validate_eagerly():
    schema = Schema().add_field(new_text_field("")).add_field(new_text_field(""))

    assert len(schema) == 2


@pytest.mark.parametrize(
    ("field", "expected_type"),
    [
        (new_text_field("a"), FieldType.TEXT),
        (new_numeric_field("a"), FieldType.NUMERIC),
        (new_geo_field("a"), FieldType.GEO),
        (new_tag_field("a"), FieldType.TAG),
    ],
)
def test_field_types(field, expected_type):
    assert field.field_type == expected_type


def test_text_field_options_constructor():
    field = new_text_field_options("f1", TextFieldOptions(weight=5.0, sortable=True, no_index=True))

    assert isinstance(field, TextField)
    assert field.weight == 5.0
    assert field.sortable is True
    assert field.no_index is True


def test_sortable_constructors():
    assert new_sortable_numeric_field("n") == NumericField("n", sortable=True)
    assert new_sortable_text_field("t", weight=2.0) == TextField("t", sortable=True, weight=2.0)
    assert new_numeric_field("n").sortable is False


def test_tag_field_separator():
    assert new_tag_field("tags", separator=";") == TagField("tags", separator=";")


def test_fields_are_immutable():
    field = new_text_field("foo")
    with pytest.raises(AttributeError):
        field.name = "bar"  # type: ignore[misc]
