import logging

import pytest

from mapping_validator.datamodel.document import DocumentFormat
from mapping_validator.datamodel.shape import TargetField
from mapping_validator.mapping.orchestrator import (
    NO_FIELDS_MESSAGE,
    NOT_FOUND_REASON,
    validate_mapping,
)

pytestmark = pytest.mark.unit


def shape(*pairs):
    return [TargetField(name=name, type_name=type_name) for name, type_name in pairs]


ID_AND_TAGS = shape(("Id", "int"), ("Tags", "List<string>"))


class TestScenarios:
    def test_all_fields_map(self):
        result = validate_mapping('{"id":1,"tags":["a","b"]}', ID_AND_TAGS)
        assert result.success is True
        assert result.total_fields == 2
        assert result.success_count == 2
        assert result.failed_count == 0
        assert result.error_message is None

    def test_type_mismatch_fails_the_run(self):
        result = validate_mapping('{"id":"x","tags":["a"]}', ID_AND_TAGS)
        assert result.success is False
        assert result.failed_count == 1
        id_result = result.fields[0]
        assert id_result.property_name == "Id"
        assert id_result.success is False
        assert id_result.reason == "expected int, got string"
        assert id_result.matched_source_name == "id"
        assert id_result.source_value_kind == "string"
        assert id_result.source_value_preview == "x"

    def test_field_order_is_preserved(self):
        targets = shape(("Tags", "List<string>"), ("Missing", "int"), ("Id", "int"))
        result = validate_mapping('{"id":1,"tags":[]}', targets)
        assert [item.property_name for item in result.fields] == ["Tags", "Missing", "Id"]

    def test_total_fields_matches_shape(self):
        targets = shape(("A", "int"), ("B", "string"), ("C", "Guid"), ("D", "bool"))
        for document in ('{}', '{"a": 1}', '{"a": null, "b": 2, "c": "x", "d": 1}'):
            result = validate_mapping(document, targets)
            assert result.total_fields == len(targets)
            assert result.success_count + result.failed_count == len(targets)

    def test_idempotent(self):
        document = '{"id": 1.5, "tags": "x", "extra": true}'
        first = validate_mapping(document, ID_AND_TAGS)
        second = validate_mapping(document, ID_AND_TAGS)
        assert first == second


class TestNullAndDecimal:
    @pytest.mark.parametrize(
        "value,success,fragment",
        [
            ("null", False, "not nullable"),
            ("42", True, None),
            ("42.0", False, "has decimal"),
        ],
    )
    def test_non_nullable_int(self, value, success, fragment):
        result = validate_mapping('{"count": %s}' % value, shape(("Count", "int")))
        field = result.fields[0]
        assert field.success is success
        if fragment is None:
            assert field.reason is None
        else:
            assert fragment in field.reason


class TestLookup:
    def test_json_case_insensitive(self):
        result = validate_mapping('{"username": "ann"}', shape(("UserName", "string")))
        assert result.fields[0].success is True
        assert result.fields[0].matched_source_name == "username"

    def test_xml_case_insensitive(self):
        result = validate_mapping(
            "<User><USERNAME>ann</USERNAME></User>",
            shape(("UserName", "string")),
            DocumentFormat.XML,
        )
        assert result.fields[0].success is True
        assert result.fields[0].matched_source_name == "USERNAME"

    def test_missing_field_with_suggestion(self):
        result = validate_mapping('{"mail": "a@b.c"}', shape(("Email", "string")))
        field = result.fields[0]
        assert field.success is False
        assert field.reason == f"{NOT_FOUND_REASON} (did you mean 'mail'?)"
        assert field.matched_source_name is None

    def test_missing_field_without_suggestion(self):
        result = validate_mapping('{"xyz": 1}', shape(("Email", "string")))
        assert result.fields[0].reason == NOT_FOUND_REASON

    def test_xml_repeated_elements_form_a_collection(self):
        result = validate_mapping(
            "<Root><Item>1</Item><Item>2</Item></Root>",
            shape(("Items", "List<int>")),
            "xml",
        )
        field = result.fields[0]
        assert field.success is True
        assert field.matched_source_name == "Item"
        assert field.source_value_kind == "array"
        assert field.source_value_preview == "[2 elements]"

    def test_xml_wrapper_element_is_a_collection(self):
        result = validate_mapping(
            "<Order><Lines><Line>a</Line></Lines></Order>",
            shape(("Lines", "IEnumerable<string>")),
            DocumentFormat.XML,
        )
        assert result.fields[0].success is True
        assert result.fields[0].source_value_kind == "object"

    def test_xml_attribute_fallback(self):
        result = validate_mapping(
            '<User id="7"><Name>Ann</Name></User>',
            shape(("Id", "int"), ("Name", "string")),
            DocumentFormat.XML,
        )
        assert result.success is True
        assert result.fields[0].source_value_kind == "attribute"

    def test_unknown_types_are_permissive(self):
        result = validate_mapping(
            '{"customer": {"id": 1}, "lookup": 5}',
            shape(("Customer", "Customer"), ("Lookup", "Dictionary<string, int>")),
        )
        assert result.success is True

    def test_xml_empty_element_string_vs_int(self):
        result = validate_mapping(
            "<User><Name/><Age/></User>",
            shape(("Name", "string"), ("Age", "int"), ("Score", "int?")),
            DocumentFormat.XML,
        )
        name, age, score = result.fields
        assert name.success is True
        assert age.success is False
        assert age.reason == "int is not nullable (got empty element)"
        assert score.success is False
        assert score.reason == NOT_FOUND_REASON


class TestCollectionMode:
    def test_first_element_is_validated(self):
        result = validate_mapping(
            '[{"id": 1}, {"id": "not a number"}]', shape(("Id", "int")), collection=True
        )
        assert result.success is True

    def test_xml_first_child_is_validated(self):
        result = validate_mapping(
            "<Users><User><Id>1</Id></User><User><Id>x</Id></User></Users>",
            shape(("Id", "int")),
            DocumentFormat.XML,
            collection=True,
        )
        assert result.success is True


class TestDocumentErrors:
    def test_no_fields_declared(self):
        result = validate_mapping('{"id": 1}', [])
        assert result.success is False
        assert result.error_message == NO_FIELDS_MESSAGE
        assert result.fields == []
        assert result.total_fields == 0

    def test_no_fields_checked_before_document(self):
        result = validate_mapping("not json", [])
        assert result.error_message == NO_FIELDS_MESSAGE

    @pytest.mark.parametrize(
        "document,document_format,collection",
        [
            ("{", DocumentFormat.JSON, False),
            ("[]", DocumentFormat.JSON, True),
            ('[{"id": 1}]', DocumentFormat.JSON, False),
            ("<Users>", DocumentFormat.XML, False),
            ("<Users/>", DocumentFormat.XML, True),
        ],
    )
    def test_errors_are_returned_not_raised(self, document, document_format, collection):
        result = validate_mapping(document, ID_AND_TAGS, document_format, collection)
        assert result.success is False
        assert result.error_message
        assert result.fields == []

    def test_unknown_format_is_rejected(self):
        with pytest.raises(ValueError):
            validate_mapping("{}", ID_AND_TAGS, "yaml")


class TestLogging:
    def test_summary_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="mapping_validator"):
            validate_mapping('{"id":1,"tags":[]}', ID_AND_TAGS)
        assert "Mapping validation finished: 2/2 fields matched (json)" in caplog.text

    def test_abort_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="mapping_validator"):
            validate_mapping("{", ID_AND_TAGS)
        assert "Mapping validation aborted" in caplog.text


class TestDeepNesting:
    def test_deep_json_root_is_a_document_error(self):
        document = "[" * 100000 + "]" * 100000
        result = validate_mapping(document, shape(("Id", "int")))
        assert result.success is False
        assert result.error_message == "Invalid JSON: nesting too deep"
        assert result.fields == []

    def test_deep_json_value_is_a_document_error(self):
        document = '{"a": ' + "[" * 100000 + "]" * 100000 + "}"
        result = validate_mapping(document, shape(("A", "List<int>")))
        assert result.error_message == "Invalid JSON: nesting too deep"

    def test_deep_xml_element_is_reported_per_field(self):
        document = "<R><A>" + "<x>" * 5000 + "</x>" * 5000 + "</A></R>"
        result = validate_mapping(document, shape(("A", "int")), DocumentFormat.XML)
        field = result.fields[0]
        assert field.success is False
        assert field.reason == "expected int, got object"
        assert field.source_value_kind == "object"
        assert len(field.source_value_preview) == 100
        assert field.source_value_preview.startswith("<A><x><x>")

    def test_long_preview_is_capped(self):
        result = validate_mapping(
            '{"note": "%s"}' % ("n" * 300), shape(("Note", "string"))
        )
        preview = result.fields[0].source_value_preview
        assert len(preview) == 100
        assert preview.endswith("...")
