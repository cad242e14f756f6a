"""Unit tests for Schema construction and description."""

import pytest
from jsonschema import Draft7Validator

from shapecheck.errors import SchemaDefinitionError
from shapecheck.fields import FieldSpec
from shapecheck.schema import Schema
from shapecheck.types import RejectionReason, TypeCategory


class Widget:
    pass


class TestSchemaConstruction:
    """Test construction-time contract violations."""

    @pytest.mark.parametrize("fields", [0, "name", None, 3.5, {FieldSpec()}])
    def test_rejects_non_container_definitions(self, fields):
        with pytest.raises(SchemaDefinitionError) as exc_info:
            Schema(fields)
        assert exc_info.value.reason is RejectionReason.SCHEMA

    def test_rejects_entry_that_is_not_a_field_spec(self):
        with pytest.raises(SchemaDefinitionError) as exc_info:
            Schema({"item": 0})
        assert exc_info.value.key == "item"
        assert exc_info.value.value == 0
        assert exc_info.value.reason is RejectionReason.SCHEMA

    def test_rejects_positional_entry_that_is_not_a_field_spec(self):
        with pytest.raises(SchemaDefinitionError) as exc_info:
            Schema([FieldSpec(int), {"type": str}])
        assert exc_info.value.key == 1

    def test_rejects_instance_check_without_class(self):
        with pytest.raises(SchemaDefinitionError):
            Schema({"widget": FieldSpec(instance=True)})
        with pytest.raises(SchemaDefinitionError):
            Schema({"widget": FieldSpec(TypeCategory.OBJECT, instance=True)})

    def test_rejects_non_callable_custom(self):
        with pytest.raises(SchemaDefinitionError):
            Schema({"value": FieldSpec(custom=True)})

    def test_rejects_invalid_type_descriptor(self):
        with pytest.raises(SchemaDefinitionError):
            Schema({"value": FieldSpec("number")})

    def test_rejects_malformed_children(self):
        with pytest.raises(SchemaDefinitionError) as exc_info:
            Schema({"root": FieldSpec(children={"leaf": "not a spec"})})
        assert exc_info.value.key == "root"
        assert isinstance(exc_info.value.__cause__, SchemaDefinitionError)

    def test_rejects_non_container_children(self):
        with pytest.raises(SchemaDefinitionError):
            Schema({"root": FieldSpec(children=42)})

    def test_field_spec_children_are_not_nested(self):
        schema = Schema({"root": FieldSpec(children=FieldSpec(int))})
        assert schema.child("root") is None

    def test_empty_schemas(self):
        assert len(Schema({})) == 0
        assert len(Schema([])) == 0


class TestSchemaMapping:
    """Test the read-only mapping interface."""

    def test_names_are_forced_to_keys(self):
        spec = FieldSpec(int)
        schema = Schema({"age": spec, "height": spec})

        assert schema["age"].name == "age"
        assert schema["height"].name == "height"
        assert spec.name is None

    def test_positional_names_are_indexes(self):
        schema = Schema([FieldSpec(int), FieldSpec(str)])
        assert schema.positional is True
        assert [schema[0].name, schema[1].name] == [0, 1]

    def test_registration_order_is_preserved(self):
        schema = Schema({"b": FieldSpec(), "a": FieldSpec(), "c": FieldSpec()})
        assert list(schema) == ["b", "a", "c"]
        assert list(schema.fields) == ["b", "a", "c"]

    def test_fields_returns_a_copy(self):
        schema = Schema({"a": FieldSpec()})
        schema.fields["b"] = FieldSpec()
        assert "b" not in schema

    def test_children_are_built_at_construction(self):
        schema = Schema({"root": FieldSpec(children={"leaf": FieldSpec(int)})}, name="config")
        child = schema.child("root")

        assert isinstance(child, Schema)
        assert child.name == "config.root"
        assert child["leaf"].name == "leaf"

    def test_schema_can_be_reused_as_children(self):
        address = Schema({"city": FieldSpec(str, required=True)})
        schema = Schema({"address": FieldSpec(children=address)})
        assert schema.child("address")["city"].required is True

    def test_repr(self):
        assert repr(Schema({"a": FieldSpec()}, name="user")) == "<Schema 'user' fields=['a']>"


class TestJsonSchemaDescription:
    """Test Draft 7 descriptions of schemas."""

    def test_object_schema(self):
        schema = Schema({
            "name": FieldSpec(str, required=True),
            "age": FieldSpec(int, defaults=0),
            "active": FieldSpec(bool),
            "widget": FieldSpec(Widget, instance=True),
        })
        document = schema.to_json_schema()

        assert document["$schema"] == "http://json-schema.org/draft-07/schema#"
        assert document["type"] == "object"
        assert document["required"] == ["name"]
        assert document["properties"]["name"] == {"type": "string"}
        assert document["properties"]["age"] == {"type": "number", "default": 0}
        assert document["properties"]["active"] == {"type": "boolean"}
        assert document["properties"]["widget"] == {"description": "Widget"}

    def test_nested_children(self):
        schema = Schema({
            "root": FieldSpec(children={"leaf": FieldSpec(int, required=True)}),
        })
        document = schema.to_json_schema()

        root = document["properties"]["root"]
        assert root["type"] == "object"
        assert root["required"] == ["leaf"]
        assert root["properties"]["leaf"] == {"type": "number"}

    def test_positional_schema(self):
        schema = Schema([FieldSpec(int, required=True), FieldSpec(str)])
        document = schema.to_json_schema()

        assert document["type"] == "array"
        assert document["items"] == [{"type": "number"}, {"type": "string"}]
        assert document["minItems"] == 1

    def test_container_types_follow_coarse_mode(self):
        coarse = Schema({"items": FieldSpec(list)}).to_json_schema()
        strict = Schema({"items": FieldSpec(list)}, coarse_containers=False).to_json_schema()

        assert coarse["properties"]["items"]["type"] == ["array", "object"]
        assert strict["properties"]["items"]["type"] == "array"

    def test_description_accepts_matching_documents(self):
        schema = Schema({
            "name": FieldSpec(str, required=True),
            "tags": FieldSpec(list),
        })
        validator = Draft7Validator(schema.to_json_schema())

        assert validator.is_valid({"name": "a", "tags": ["x"]})
        assert not validator.is_valid({"tags": []})
