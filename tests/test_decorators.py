"""Unit tests for filebridge.decorators — @record, @web_api, relationship helpers."""

import builtins

import pytest
from pydantic import BaseModel, Field

from filebridge.decorators.core import (
    _humanize,
    _infer_app,
    _to_snake,
    belongs_to,
    build_record_metadata,
    has_many,
    picklist_value,
    record,
    web_api,
)
from filebridge.engine.registry import object_registry


class TestHelpers:
    def test_infer_app(self):
        assert _infer_app("apps.crm.records.account") == "crm"
        assert _infer_app("filebridge.api") == ""

    def test_to_snake(self):
        assert _to_snake("ContentDocumentLink") == "content_document_link"
        assert _to_snake("HTTPServer") == "http_server"

    def test_humanize(self):
        assert _humanize("account_id") == "Account Id"
        assert _humanize("OpportunityLineItem") == "Opportunity Line Item"


class TestBuiltinsInjection:
    def test_decorators_in_builtins(self):
        for name in ("record", "web_api", "has_many", "belongs_to", "picklist_value"):
            assert hasattr(builtins, name)
        assert builtins.record is record


class TestRecordDecorator:
    def test_registers_and_attaches_metadata(self):
        @record
        class Gadget(BaseModel):
            name: str = Field(max_length=40)

            class Meta:
                key_prefix = "g01"
                files_enabled = True
                permissions = {"view": ["*"]}

        meta = Gadget._filebridge_meta
        assert Gadget._filebridge_type == "record"
        assert meta["name"] == "Gadget"
        assert meta["label"] == "Gadget"
        assert meta["label_plural"] == "Gadgets"
        assert meta["key_prefix"] == "g01"
        assert meta["files_enabled"] is True
        assert meta["table_name"] == "gadgets"
        reg = object_registry.resolve("records.Gadget")
        assert reg is not None and reg.handler is Gadget
        object_registry.unregister("records.Gadget")

    def test_namespaced_metadata(self):
        class LineItem(BaseModel):
            class Meta:
                namespace = "billing"
                label = "Invoice Line"

        meta = build_record_metadata(LineItem)
        assert meta["name"] == "billing__LineItem"
        assert meta["local_name"] == "LineItem"
        assert meta["label"] == "Invoice Line"
        assert meta["label_plural"] == "Invoice Lines"
        assert meta["files_enabled"] is False
        assert meta["table_name"] == "line_items"


class TestWebApiDecorator:
    def test_registers_and_calls_through(self):
        @web_api(name="echoThing", method="POST", path="/echo")
        def echo(value):
            return value

        assert echo(3) == 3
        assert echo._filebridge_meta["method"] == "POST"
        assert object_registry.resolve("web_apis.echoThing") is not None
        object_registry.unregister("web_apis.echoThing")

    def test_api_operations_registered(self):
        import filebridge.api  # noqa: F401

        assert object_registry.contains("web_apis.getRelatedFiles")
        assert object_registry.contains("web_apis.getObjectDescribe")


class TestRelationshipHelpers:
    def test_has_many(self):
        rel = has_many("Contact", field="account_id")
        assert rel == {"_relationship": "has_many", "target": "Contact", "field": "account_id", "back_ref": None}

    def test_belongs_to(self):
        rel = belongs_to("Account", required=True)
        assert rel["_relationship"] == "belongs_to"
        assert rel["field"] is None
        assert rel["required"] is True

    def test_picklist_value_defaults_label(self):
        assert picklist_value("web") == {"value": "web", "label": "web", "active": True, "default": False}

    def test_picklist_value_inactive(self):
        assert picklist_value("x", label="X", active=False)["active"] is False
