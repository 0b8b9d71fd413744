"""
Tests for invocation contexts and deep freezing.

Run with: pytest tests/test_context.py -v
"""
from collections import namedtuple
from types import MappingProxyType, SimpleNamespace

import pytest

from lambda6.runtime.context import FrozenView, InvocationContext, create_invocation_context, deep_freeze
from lambda6.runtime.endpoint import operation
from lambda6.runtime.handler import Handler


class ContextHandler(Handler):

    @operation
    def other_operation(self, payload=None):
        return "success"

    def whoami(self):
        return self.operation


class Point:

    def __init__(self, x=None):
        if x is not None:
            self.x = x

    def move(self, dx):
        self.x = self.x + dx

    def mark(self):
        self.marked = True

    @property
    def doubled(self):
        return self.x * 2


Pair = namedtuple("Pair", "left right")


def _fields():
    return {
        "event": {"MethodName": "createUser", "items": [1, {"nested": True}]},
        "context": {
            "awsRequestId": "requestId",
            "objValue": {"email": "user@example.com"},
            "nullValue": None,
            "numberValue": 3,
            "succeed": lambda: "succeeded",
        },
        "operation": "createUser",
        "metadata": {"key1": "val1"},
    }


# =============================================================================
# TEST: create_invocation_context
# =============================================================================

class TestCreateInvocationContext:
    """Tests for Handler.create_invocation_context()."""

    def test_rejects_non_mapping(self):
        handler = ContextHandler()
        handler.create_invocation_context()
        handler.create_invocation_context(None)
        handler.create_invocation_context({})
        with pytest.raises(TypeError, match="fields must be a mapping"):
            handler.create_invocation_context(1)

    def test_fields_and_handler_fallback(self):
        """Context exposes its fields plus the handler's options and methods."""
        handler = ContextHandler({"operationKey": "MethodName"})
        fields = _fields()
        ictx = handler.create_invocation_context(fields)

        assert isinstance(ictx, InvocationContext)
        assert ictx.options.operation_key == "MethodName"
        assert ictx.other_operation() == "success"
        assert ictx.event == fields["event"]
        assert ictx.operation == "createUser"
        assert ictx.metadata == {"key1": "val1"}
        assert ictx.context["succeed"]() == "succeeded"

    def test_handler_methods_are_bound_to_context(self):
        ictx = ContextHandler().create_invocation_context({"operation": "ping"})
        assert ictx.whoami() == "ping"

    def test_top_level_fields_are_read_only(self):
        ictx = ContextHandler().create_invocation_context(_fields())

        with pytest.raises(TypeError):
            ictx.event = "newValue"
        with pytest.raises(TypeError):
            ictx.options = None
        with pytest.raises(TypeError):
            del ictx.operation

    def test_nested_values_are_writable_without_deep_copy(self):
        fields = _fields()
        ictx = ContextHandler().create_invocation_context(fields)

        ictx.event["MethodName"] = "newValue"
        assert fields["event"]["MethodName"] == "newValue"

    def test_nested_values_are_read_only_with_deep_copy(self):
        handler = ContextHandler({"operationKey": "MethodName", "deepCopy": True})
        fields = _fields()
        ictx = handler.create_invocation_context(fields)

        assert ictx.options.operation_key == "MethodName"
        assert ictx.other_operation() == "success"
        assert ictx.event["MethodName"] == "createUser"
        assert ictx.event["items"][0] == 1
        assert ictx.metadata == fields["metadata"]
        assert ictx.context["succeed"]() == "succeeded"
        assert ictx.context["nullValue"] is None

        with pytest.raises(TypeError):
            ictx.event["MethodName"] = "newValue"
        with pytest.raises(TypeError):
            ictx.context["objValue"]["email"] = "other@example.com"
        with pytest.raises(TypeError):
            ictx.event["items"][1]["nested"] = False
        # Source values are untouched
        assert fields["event"]["MethodName"] == "createUser"

    def test_each_call_builds_a_new_context(self):
        handler = ContextHandler()
        first = handler.create_invocation_context({"operation": "a"})
        second = handler.create_invocation_context({"operation": "b"})

        assert first is not second
        assert (first.operation, second.operation) == ("a", "b")

    def test_unknown_attribute(self):
        ictx = ContextHandler().create_invocation_context({})
        with pytest.raises(AttributeError):
            ictx.does_not_exist

    def test_context_is_a_handler_instance(self):
        handler = ContextHandler()
        ictx = handler.create_invocation_context({"operation": "ping"})

        assert isinstance(ictx, ContextHandler)
        assert type(ictx) is type(handler.create_invocation_context({}))
        assert ictx.deps is handler.deps
        assert "_lambda6_handler" not in dir(ictx)

    def test_context_of_a_context_reads_the_same_handler(self):
        handler = ContextHandler()
        outer = handler.create_invocation_context({"operation": "outer"})
        inner = create_invocation_context(outer, {"operation": "inner"})

        assert inner.options is handler.options
        assert inner.whoami() == "inner"

    def test_direct_builder(self):
        handler = ContextHandler()
        ictx = create_invocation_context(handler, {"event": {"a": [1]}}, deep_copy=True)
        assert ictx.event["a"] == (1,)
        assert "event" in dir(ictx)


# =============================================================================
# TEST: deep_freeze
# =============================================================================

class TestDeepFreeze:
    """Tests for deep_freeze()."""

    def test_scalars_are_unchanged(self):
        for value in ("s", b"b", 1, 2.5, True, None):
            assert deep_freeze(value) is value

    def test_functions_kept_by_reference(self):
        def fn():
            return 1
        frozen = deep_freeze({"fn": fn})
        assert frozen["fn"] is fn

    def test_containers(self):
        frozen = deep_freeze({"list": [1, 2], "set": {3}, "bytes": bytearray(b"x")})

        assert isinstance(frozen, MappingProxyType)
        assert frozen["list"] == (1, 2)
        assert frozen["set"] == frozenset({3})
        assert frozen["bytes"] == b"x"

    def test_objects_become_frozen_views(self):
        lambda_context = SimpleNamespace(aws_request_id="req-1", identity=SimpleNamespace(id="x"))
        frozen = deep_freeze(lambda_context)

        assert isinstance(frozen, FrozenView)
        assert frozen.aws_request_id == "req-1"
        assert frozen.identity.id == "x"
        with pytest.raises(TypeError):
            frozen.aws_request_id = "req-2"
        with pytest.raises(TypeError):
            frozen.identity.id = "y"
        assert lambda_context.aws_request_id == "req-1"

    def test_cycles(self):
        data = {"name": "root"}
        data["self"] = data
        frozen = deep_freeze(data)

        assert frozen["self"] is frozen

    def test_named_tuples_keep_their_type(self):
        frozen = deep_freeze({"pair": Pair([1], {"a": 2})})

        assert isinstance(frozen["pair"], Pair)
        assert frozen["pair"].left == (1,)
        assert frozen["pair"].right["a"] == 2
        with pytest.raises(TypeError):
            frozen["pair"].right["a"] = 3

    def test_frozen_object_methods_cannot_write(self):
        """Methods run against the view, not the original object."""
        point = Point(1)
        frozen = deep_freeze({"pt": point})["pt"]

        assert frozen.x == 1
        assert frozen.doubled == 2
        with pytest.raises(TypeError):
            frozen.move(5)
        assert point.x == 1

    def test_objects_with_empty_dict_are_wrapped(self):
        point = Point()
        frozen = deep_freeze(point)

        assert isinstance(frozen, FrozenView)
        with pytest.raises(TypeError):
            frozen.x = 1
        with pytest.raises(TypeError):
            frozen.mark()
        assert not hasattr(point, "x")
        assert not hasattr(point, "marked")

    def test_deep_copy_context_protects_event_objects(self):
        point = Point(1)
        handler = ContextHandler({"deepCopy": True})
        ictx = handler.create_invocation_context({"event": {"pt": point}})

        with pytest.raises(TypeError):
            ictx.event["pt"].move(5)
        assert point.x == 1
