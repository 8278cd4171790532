"""Tests for filebridge.describe — the object describe operation."""

from typing import Optional
from unittest.mock import patch

import pytest
from pydantic import BaseModel, Field

from filebridge.decorators.core import belongs_to, has_many
from filebridge.describe.service import ObjectDescribeService
from filebridge.engine.context import ExecutionContext, set_execution_context
from filebridge.engine.errors import FileBridgeSchemaError
from filebridge.schema.service import SchemaService


@pytest.fixture
def describer(schema):
    return ObjectDescribeService(schema)


class TestTypeAndFields:
    def test_type_labels(self, describer):
        descriptor = describer.get_object_describe("account")
        assert descriptor.name == "Account"
        assert descriptor.local_name == "Account"
        assert descriptor.label == "Account"
        assert descriptor.label_plural == "Accounts"
        assert descriptor.key_prefix == "001"

    def test_field_labels_and_help_text(self, describer):
        fields = describer.get_object_describe("Account").field_descriptors
        assert fields["name"].label == "Account Name"
        assert fields["annual_revenue"].label == "Annual Revenue"
        assert fields["description"].help_text == "Internal notes about the account"
        assert fields["website"].help_text is None

    def test_picklist_only_active_values(self, describer):
        fields = describer.get_object_describe("Account").field_descriptors
        assert [p.value for p in fields["industry"].picklist_values] == [
            "Technology", "Finance", "Healthcare",
        ]
        assert fields["website"].picklist_values == []

    def test_picklist_option_shape(self, describer):
        data = describer.get_object_describe("Contact").to_api_dict()
        assert data["fields"]["lead_source"]["picklistValues"] == [
            {"label": "Web", "value": "web"},
            {"label": "Referral", "value": "referral"},
        ]

    def test_namespaced_fields_keyed_by_local_name(self, describer):
        descriptor = describer.get_object_describe("billing__Invoice")
        assert descriptor.name == "billing__Invoice"
        assert descriptor.local_name == "Invoice"
        assert set(descriptor.field_descriptors) == {
            "invoice_number", "status", "total", "due_date", "account_id",
        }
        status = descriptor.field_descriptors["status"]
        assert status.name == "billing__status"
        assert [p.label for p in status.picklist_values] == ["Draft", "Sent", "Paid"]

    def test_unknown_type(self, describer):
        with pytest.raises(FileBridgeSchemaError, match="Unknown record type"):
            describer.get_object_describe("Widget")

    def test_api_dict_keys(self, describer):
        data = describer.get_object_describe("Account").to_api_dict()
        assert set(data) == {
            "name", "localName", "label", "labelPlural", "keyPrefix", "fields", "childRelationships",
        }
        assert set(data["fields"]["industry"]) == {"name", "localName", "label", "helpText", "picklistValues"}


class TestChildRelationships:
    def test_admin_sees_every_file_capable_child(self, describer, admin_context):
        set_execution_context(admin_context)
        relationships = describer.get_object_describe("Account").child_relationships
        assert set(relationships) == {"contacts", "opportunities", "cases", "invoices"}

    def test_type_without_files_excluded(self, describer, admin_context):
        set_execution_context(admin_context)
        assert "notes" not in describer.get_object_describe("Account").child_relationships

    def test_groups_limit_visible_children(self, describer, execution_context):
        set_execution_context(execution_context)
        relationships = describer.get_object_describe("Account").child_relationships
        assert set(relationships) == {"contacts", "opportunities", "invoices"}

    def test_user_without_groups(self, describer):
        set_execution_context(ExecutionContext(user_id="u", username="u", user_type="basic", user_groups=set()))
        relationships = describer.get_object_describe("Account").child_relationships
        assert set(relationships) == {"contacts", "invoices"}

    def test_no_context_sees_public_types_only(self, describer):
        relationships = describer.get_object_describe("Account").child_relationships
        assert set(relationships) == {"contacts", "invoices"}

    def test_unnamed_relationships_excluded(self, describer, admin_context):
        set_execution_context(admin_context)
        assert describer.get_object_describe("Contact").child_relationships == {}

    def test_relationship_descriptor(self, describer):
        contacts = describer.get_object_describe("Account").child_relationships["contacts"]
        assert contacts.relationship_name == "contacts"
        assert contacts.field_name == "account_id"
        assert contacts.field_label == "Account ID"
        assert contacts.object_name == "Contact"
        assert contacts.object_label == "Contact"
        assert contacts.object_label_plural == "Contacts"

    def test_namespaced_child(self, describer):
        data = describer.get_object_describe("Account").to_api_dict()
        assert data["childRelationships"]["invoices"] == {
            "relationshipName": "invoices",
            "fieldName": "billing__account_id",
            "fieldLabel": "Account ID",
            "objectName": "billing__Invoice",
            "objectLabel": "Invoice",
            "objectLabelPlural": "Invoices",
        }

    def test_file_linkable_types(self, describer, execution_context):
        set_execution_context(execution_context)
        assert describer.file_linkable_types() == {
            "Account", "Contact", "Opportunity", "billing__Invoice",
        }

    def test_undeclared_foreign_key_label_is_humanized(self):
        class Folder(BaseModel):
            title: str
            documents: list = has_many("Document", field="folder_ref")

            class Meta:
                files_enabled = True
                permissions = {"view": ["*"]}

        class Document(BaseModel):
            title: str = Field(max_length=80)
            folder: Optional[dict] = belongs_to("Folder", field="folder_ref")

            class Meta:
                files_enabled = True
                permissions = {"view": ["*"]}

        describer = ObjectDescribeService(SchemaService([Folder, Document]))
        documents = describer.get_object_describe("Folder").child_relationships["documents"]
        assert documents.field_label == "Folder Ref"


class TestDescribeLogging:
    def test_writes_schema_log_entry(self, describer, execution_context):
        set_execution_context(execution_context)
        with patch("filebridge.describe.service.log") as mock_log:
            describer.get_object_describe("Account")

        entry = mock_log.call_args[0][0]
        assert entry.object_type == "schema"
        assert entry.data["object_ref"] == "schema.Account"
        assert entry.data["field_count"] == 7
        assert entry.data["relationship_count"] == 3
        assert entry.data["execution_id"] == execution_context.execution_id
