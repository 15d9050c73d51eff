"""
Tests for the supabase-py adapter, using a fake native request builder.
"""

from types import SimpleNamespace

import httpx
import pytest
from postgrest.exceptions import APIError

from profile_gateway.db.errors import DatabaseError
from profile_gateway.db.supabase_adapter import SupabaseDatabaseClient, to_database_error


class FakeNativeBuilder:
    def __init__(self, log, result=None, error=None):
        self.log = log
        self.result = result
        self.error = error

    def _chain(self, name):
        def call(*args, **kwargs):
            self.log.append((name, args, kwargs))
            return self

        return call

    def __getattr__(self, name):
        return self._chain(name)

    def execute(self):
        if self.error is not None:
            raise self.error
        return self.result


class FakeNativeClient:
    def __init__(self, result=None, error=None):
        self.log = []
        self.result = result
        self.error = error

    def table(self, name):
        self.log.append(("table", (name,), {}))
        return FakeNativeBuilder(self.log, self.result, self.error)


def api_error(message, code=None):
    return APIError({"message": message, "code": code, "hint": None, "details": None})


def test_forwards_select_chain():
    native = FakeNativeClient(result=SimpleNamespace(data=[{"id": 1}], count=None))

    response = SupabaseDatabaseClient(native).table("profiles").select("*").execute()

    assert response.data == [{"id": 1}]
    assert native.log == [("table", ("profiles",), {}), ("select", ("*",), {})]


def test_select_after_mutation_is_not_forwarded():
    native = FakeNativeClient(result=SimpleNamespace(data=[{"id": 7}]))

    (
        SupabaseDatabaseClient(native)
        .table("profiles")
        .update({"bio": "x"})
        .eq("id", "7")
        .select()
        .execute()
    )

    assert [entry[0] for entry in native.log] == ["table", "update", "eq"]


def test_insert_chain_is_forwarded():
    native = FakeNativeClient(result=SimpleNamespace(data=[{"id": 1}]))

    SupabaseDatabaseClient(native).table("profiles").insert([{"username": "a"}]).select().execute()

    assert native.log == [("table", ("profiles",), {}), ("insert", ([{"username": "a"}],), {})]


def test_none_data_becomes_empty_list():
    native = FakeNativeClient(result=SimpleNamespace(data=None))

    assert SupabaseDatabaseClient(native).table("profiles").delete().eq("username", "x").execute().data == []


def test_api_error_is_converted():
    native = FakeNativeClient(error=api_error("JWT expired", code="PGRST301"))

    with pytest.raises(DatabaseError) as exc_info:
        SupabaseDatabaseClient(native).table("profiles").select("*").execute()

    assert exc_info.value.message == "JWT expired"
    assert exc_info.value.http_status == 401
    assert exc_info.value.code == "PGRST301"


def test_transport_error_is_converted():
    native = FakeNativeClient(error=httpx.ConnectError("Name or service not known"))

    with pytest.raises(DatabaseError, match="Could not reach Supabase") as exc_info:
        SupabaseDatabaseClient(native).table("profiles").select("*").execute()

    assert exc_info.value.http_status is None


@pytest.mark.parametrize(
    "code,status",
    [
        ("23505", 409),
        ("42501", 403),
        ("22P02", 400),
        ("401", 401),
        ("503", 503),
        ("200", None),
        ("101", None),
        ("999", None),
        ("XX000", None),
        (None, None),
    ],
)
def test_status_from_error_code(code, status):
    assert to_database_error(api_error("failed", code=code)).http_status == status


def test_error_without_message_uses_fallback():
    assert to_database_error(api_error(None)).message == "Unknown error"
