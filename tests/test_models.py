"""Tests for models.py — flags, JSON payload wrapper, confirmations."""

import dataclasses

import pytest

from tdcli.exceptions import UsageError
from tdcli.models import Confirmation, Flags, ObjectPayload, UpdateField


class TestFlags:
    def test_defaults(self):
        assert Flags() == Flags(format="table", output="", verbose=False)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Flags().format = "json"


class TestObjectPayload:
    def test_accepts_dict(self):
        assert ObjectPayload.from_value({"a": 1}, "ctx").data == {"a": 1}

    def test_rejects_list(self):
        with pytest.raises(UsageError, match="Invalid JSON in ctx: expected object, got list"):
            ObjectPayload.from_value([1], "ctx")


class TestUpdateField:
    def test_default_kind(self):
        assert UpdateField("name").kind == "str"


class TestConfirmation:
    def test_headline(self):
        assert Confirmation("audience", "1", "deleted").headline == (
            "Audience 1 deleted successfully"
        )

    def test_headline_without_id(self):
        assert Confirmation("audience", "", "created").headline == "Audience created successfully"

    def test_to_dict(self):
        c = Confirmation("token", "t", "updated", {"Updated Fields": "name"})
        assert c.to_dict() == {
            "ok": True,
            "mutation": {
                "resource": "token",
                "id": "t",
                "action": "updated",
                "details": {"Updated Fields": "name"},
            },
        }
