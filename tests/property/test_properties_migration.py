"""Property-based tests for batch migration mappings."""

import httpx
import pytest
from hypothesis import given, settings

from brollkit.config import Settings
from brollkit.storage.client import StorageClient
from brollkit.storage.migration import UrlMigrator, is_external_stock_url
from tests.conftest import STORAGE_BASE, FakeBackend
from tests.property.conftest import generate_url_list, other_urls, stock_urls

pytestmark = pytest.mark.property


def _migrator(backend: FakeBackend) -> UrlMigrator:
    client = StorageClient(
        settings=Settings(storage_api_base=STORAGE_BASE),
        transport=httpx.MockTransport(backend.handler),
    )
    return UrlMigrator(client)


class TestClassifierProperties:
    @given(url=stock_urls())
    def test_stock_hosts_are_external(self, url):
        assert is_external_stock_url(url)

    @given(url=other_urls())
    def test_other_hosts_are_not_external(self, url):
        assert not is_external_stock_url(url)


class TestMigrationProperties:
    @given(urls=generate_url_list())
    @settings(max_examples=50)
    def test_unavailable_is_identity(self, urls):
        backend = FakeBackend()
        backend.healthy = False
        assert _migrator(backend).migrate(urls, "proj") == {u: u for u in urls}

    @given(urls=generate_url_list())
    @settings(max_examples=50)
    def test_failure_is_identity_for_all(self, urls):
        backend = FakeBackend()
        backend.batch_status = 500
        result = _migrator(backend).migrate(urls, "proj")
        if any(is_external_stock_url(u) for u in urls):
            assert result == {u: u for u in urls}
        else:
            assert result == {}

    @given(urls=generate_url_list())
    @settings(max_examples=50)
    def test_success_mapping_is_total(self, urls):
        backend = FakeBackend()
        result = _migrator(backend).migrate(urls, "proj")
        if not any(is_external_stock_url(u) for u in urls):
            assert result == {}
            return
        assert set(urls) <= set(result)
        for url in urls:
            if is_external_stock_url(url):
                assert result[url].startswith("/broll/")
            else:
                assert result[url] == url
