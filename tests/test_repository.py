"""Tests for catalogue loading over HTTP and from disk."""

import json

import httpx
import pytest

from constellation.errors import CatalogueLoadError
from constellation.repository import CatalogueSummary, load_catalogue, parse_catalogue

RECORDS = {
    "record": [
        {
            "id": 1,
            "title": "Harbour",
            "artist": "M. Oduya",
            "category": {"name": "Drawing", "nicename": "drawing"},
            "image": {"url": "/img/1.png"},
            "badge": {"url": "/img/badge.png"},
            "related": [2, 404],
        },
        {
            "id": 2,
            "title": "Salt Lines",
            "category": {"name": "Sound", "nicename": "sound"},
            "image": {"url": "/img/2.png"},
            "link": {"url": "https://example.org/2", "target": "_blank"},
        },
    ]
}


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestLoadOverHttp:
    def test_success(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/assets/data/data.json"
            return httpx.Response(200, json=RECORDS)

        client = _client(handler)
        items = load_catalogue("http://example.com/assets/data/data.json", client=client)
        client.close()

        assert [i.id for i in items] == [1, 2]
        assert items[0].related == (2, 404)
        assert items[1].related == ()
        assert items[1].artist is None
        assert items[1].link.target == "_blank"

    def test_non_2xx_is_fatal(self):
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(503, text="unavailable")

        client = _client(handler)
        with pytest.raises(CatalogueLoadError, match="HTTP error 503"):
            load_catalogue("http://example.com/data.json", client=client)
        client.close()
        assert calls == [1]  # no retry

    def test_malformed_json(self):
        client = _client(lambda request: httpx.Response(200, text="{not json"))
        with pytest.raises(CatalogueLoadError, match="malformed JSON"):
            load_catalogue("http://example.com/data.json", client=client)
        client.close()

    def test_network_error(self):
        class ErrorTransport(httpx.BaseTransport):
            def handle_request(self, request: httpx.Request) -> httpx.Response:  # type: ignore[override]
                raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=ErrorTransport())
        with pytest.raises(CatalogueLoadError, match="connection refused"):
            load_catalogue("http://example.com/data.json", client=client)
        client.close()


class TestLoadFromFile:
    def test_reads_file(self, catalogue_file):
        items = load_catalogue(str(catalogue_file))
        assert [i.id for i in items] == [1, 2, 3, 4, 5]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogueLoadError) as exc:
            load_catalogue(str(tmp_path / "nope.json"))
        assert exc.value.source.endswith("nope.json")


class TestParseCatalogue:
    def test_missing_record_key(self):
        with pytest.raises(CatalogueLoadError, match="invalid catalogue"):
            parse_catalogue(json.dumps({"items": []}))

    def test_item_missing_required_field(self):
        bad = {"record": [{"id": 1, "title": "No category", "image": {"url": "x"}}]}
        with pytest.raises(CatalogueLoadError, match="invalid catalogue"):
            parse_catalogue(json.dumps(bad))

    def test_null_related_is_empty(self):
        record = dict(RECORDS["record"][1], related=None)
        items = parse_catalogue(json.dumps({"record": [record]}))
        assert items[0].related == ()

    def test_empty_record_list(self):
        assert parse_catalogue('{"record": []}') == []


class TestCatalogueSummary:
    def test_counts(self):
        summary = CatalogueSummary(parse_catalogue(json.dumps(RECORDS)))
        assert summary.items == 2
        assert summary.relations == 2
        assert summary.dangling == 1
        assert summary.isolated == 1
        assert summary.categories == {"Drawing": 1, "Sound": 1}
        assert summary.mean_related == 1.0
        assert "2 items" in repr(summary)
