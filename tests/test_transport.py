"""Tests for the Google Sheets REST transport (httpx.MockTransport, no network)."""

import json

import httpx
import pytest

from sheetbase.core import CallableTokenProvider, GoogleSheetsTransport, StaticTokenProvider
from sheetbase.core.transport import a1_range
from sheetbase.exceptions import (
    AmbiguousMutationOutcomeException,
    CredentialMissingException,
    DatastoreUnavailableException,
    TableNotFoundException,
)

BASE = "https://sheets.test/v4/spreadsheets"
PREFIX = "/v4/spreadsheets/sheet-1"


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses):
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0) if self._responses else httpx.Response(200, json={})
        if isinstance(response, Exception):
            raise response
        return response

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


def make_transport(recorder: Recorder, token: str | None = "tok") -> GoogleSheetsTransport:
    return GoogleSheetsTransport(
        "sheet-1",
        StaticTokenProvider(token),
        base_url=BASE,
        client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
    )


SHEETS = {
    "sheets": [
        {"properties": {"sheetId": 0, "title": "Stock"}},
        {"properties": {"sheetId": 917, "title": "Material Issue"}},
    ]
}


def test_a1_range_quotes_table_names():
    assert a1_range("Stock") == "'Stock'"
    assert a1_range("Material Issue", "A5") == "'Material Issue'!A5"
    assert a1_range("Bob's", "1:1") == "'Bob''s'!1:1"


class TestReads:

    @pytest.mark.asyncio
    async def test_get_values(self):
        recorder = Recorder(httpx.Response(200, json={"values": [["a"], ["1"]]}))
        transport = make_transport(recorder)

        assert await transport.get_values("Stock") == [["a"], ["1"]]

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == f"{PREFIX}/values/'Stock'"
        assert request.headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_empty_sheet_has_no_values_key(self):
        transport = make_transport(Recorder(httpx.Response(200, json={"range": "'Empty'!A1:Z1000"})))

        assert await transport.get_values("Empty") == []

    @pytest.mark.asyncio
    async def test_get_header_reads_first_row_only(self):
        recorder = Recorder(httpx.Response(200, json={"values": [["itemCode", "itemName"]]}))
        transport = make_transport(recorder)

        assert await transport.get_header("Material Issue") == ["itemCode", "itemName"]
        assert recorder.requests[0].url.path == f"{PREFIX}/values/'Material Issue'!1:1"

    @pytest.mark.asyncio
    async def test_list_tables(self):
        recorder = Recorder(httpx.Response(200, json=SHEETS))
        transport = make_transport(recorder)

        assert await transport.list_tables() == ["Stock", "Material Issue"]
        assert recorder.requests[0].url.params["fields"] == "sheets.properties(sheetId,title)"


class TestMutations:

    @pytest.mark.asyncio
    async def test_append_rows(self):
        recorder = Recorder()
        transport = make_transport(recorder)

        await transport.append_rows("Stock", [["A4", "Rivet"]])

        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path == f"{PREFIX}/values/'Stock'!A1:append"
        assert request.url.params["valueInputOption"] == "USER_ENTERED"
        assert request.url.params["insertDataOption"] == "INSERT_ROWS"
        assert recorder.body()["values"] == [["A4", "Rivet"]]

    @pytest.mark.asyncio
    async def test_write_row_targets_position(self):
        recorder = Recorder()
        transport = make_transport(recorder)

        await transport.write_row("Stock", 5, ["A4", "Rivet"])

        request = recorder.requests[0]
        assert request.method == "PUT"
        assert request.url.path == f"{PREFIX}/values/'Stock'!A5"
        assert recorder.body() == {"range": "'Stock'!A5", "majorDimension": "ROWS", "values": [["A4", "Rivet"]]}

    @pytest.mark.asyncio
    async def test_write_rows_is_one_batch_call(self):
        recorder = Recorder()
        transport = make_transport(recorder)

        await transport.write_rows("Stock", [(2, ["a"]), (4, ["b"])])

        assert len(recorder.requests) == 1
        assert recorder.requests[0].url.path == f"{PREFIX}/values:batchUpdate"
        assert [d["range"] for d in recorder.body()["data"]] == ["'Stock'!A2", "'Stock'!A4"]

    @pytest.mark.asyncio
    async def test_delete_row_resolves_sheet_id_once(self):
        recorder = Recorder(httpx.Response(200, json=SHEETS))
        transport = make_transport(recorder)

        await transport.delete_row("Material Issue", 5)
        await transport.delete_row("Material Issue", 3)

        assert len(recorder.requests) == 3
        assert recorder.requests[1].url.path == f"{PREFIX}:batchUpdate"
        dimension = recorder.body(1)["requests"][0]["deleteDimension"]["range"]
        assert dimension == {"sheetId": 917, "dimension": "ROWS", "startIndex": 4, "endIndex": 5}

    @pytest.mark.asyncio
    async def test_delete_row_in_unknown_table(self):
        transport = make_transport(Recorder(httpx.Response(200, json=SHEETS)))

        with pytest.raises(TableNotFoundException):
            await transport.delete_row("Nope", 2)

    @pytest.mark.asyncio
    async def test_create_table_remembers_sheet_id(self):
        reply = {"replies": [{"addSheet": {"properties": {"sheetId": 55, "title": "Vendor"}}}]}
        recorder = Recorder(httpx.Response(200, json=reply))
        transport = make_transport(recorder)

        await transport.create_table("Vendor")
        await transport.delete_row("Vendor", 2)

        assert recorder.body(0)["requests"] == [{"addSheet": {"properties": {"title": "Vendor"}}}]
        assert len(recorder.requests) == 2
        assert recorder.body(1)["requests"][0]["deleteDimension"]["range"]["sheetId"] == 55

    @pytest.mark.asyncio
    async def test_clear_rows(self):
        recorder = Recorder()
        transport = make_transport(recorder)

        await transport.clear_rows("Stock", 2)

        assert recorder.requests[0].url.path == f"{PREFIX}/values/'Stock'!A2:ZZZ:clear"


class TestFailures:

    @pytest.mark.asyncio
    async def test_missing_token_sends_nothing(self):
        recorder = Recorder()
        transport = make_transport(recorder, token="")

        with pytest.raises(CredentialMissingException) as exc_info:
            await transport.get_values("Stock")

        assert exc_info.value.status_code == 401
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_callable_token_provider(self):
        async def fetch():
            return "fresh"

        recorder = Recorder(httpx.Response(200, json={}))
        transport = GoogleSheetsTransport(
            "sheet-1",
            CallableTokenProvider(fetch),
            base_url=BASE,
            client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
        )

        await transport.get_values("Stock")

        assert recorder.requests[0].headers["Authorization"] == "Bearer fresh"

    @pytest.mark.asyncio
    async def test_http_error_is_unavailable_with_upstream_status(self):
        error = {"error": {"code": 401, "message": "Request had invalid authentication credentials."}}
        transport = make_transport(Recorder(httpx.Response(401, json=error)))

        with pytest.raises(DatastoreUnavailableException) as exc_info:
            await transport.get_values("Stock")

        assert exc_info.value.details["upstream_status"] == 401
        assert exc_info.value.details["reason"] == "Request had invalid authentication credentials."
        assert exc_info.value.message == "Data temporarily unavailable, retry."

    @pytest.mark.asyncio
    async def test_server_error_on_mutation(self):
        transport = make_transport(Recorder(httpx.Response(503, text="backend down")))

        with pytest.raises(DatastoreUnavailableException) as exc_info:
            await transport.append_rows("Stock", [["x"]])

        assert exc_info.value.message == "Change not saved, retry."
        assert exc_info.value.details["reason"] == "backend down"

    @pytest.mark.asyncio
    async def test_unparseable_range_is_missing_table(self):
        error = {"error": {"code": 400, "message": "Unable to parse range: 'Nope'"}}
        transport = make_transport(Recorder(httpx.Response(400, json=error)))

        with pytest.raises(TableNotFoundException):
            await transport.get_values("Nope")

    @pytest.mark.asyncio
    async def test_connect_error_is_unavailable_even_for_mutations(self):
        transport = make_transport(Recorder(httpx.ConnectError("refused")))

        with pytest.raises(DatastoreUnavailableException):
            await transport.append_rows("Stock", [["x"]])

    @pytest.mark.asyncio
    async def test_read_timeout_on_mutation_is_ambiguous(self):
        transport = make_transport(Recorder(httpx.ReadTimeout("timed out")))

        with pytest.raises(AmbiguousMutationOutcomeException) as exc_info:
            await transport.append_rows("Stock", [["x"]])

        assert exc_info.value.status_code == 504
        assert exc_info.value.details["operation"] == "append"

    @pytest.mark.asyncio
    async def test_read_timeout_on_read_is_unavailable(self):
        transport = make_transport(Recorder(httpx.ReadTimeout("timed out")))

        with pytest.raises(DatastoreUnavailableException):
            await transport.get_values("Stock")
