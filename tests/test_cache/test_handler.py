"""Unit tests for the per-page cache handler."""

import logging
from unittest.mock import MagicMock

import pytest

from flatten.cache.handler import CacheHandler
from flatten.cache.store import MemoryStore
from flatten.config import FlattenConfig


class TestCacheHandler:
    """Test suite for CacheHandler class."""

    @pytest.fixture
    def mock_store(self):
        """Create a mock cache store."""
        mock = MagicMock()
        mock.has.return_value = False
        mock.get.return_value = None
        mock.put.return_value = True
        return mock

    @pytest.fixture
    def handler(self, mock_store):
        """Create CacheHandler with mocked store."""
        return CacheHandler(mock_store, FlattenConfig(lifetime=300), "GET-/blog/")

    def test_get_hash(self, handler):
        """Test the key given at construction is returned."""
        assert handler.get_hash() == "GET-/blog/"
        assert handler.hash == "GET-/blog/"

    def test_hash_is_read_only(self, handler):
        """Test the key cannot be reassigned."""
        with pytest.raises(AttributeError):
            handler.hash = "POST-/blog/"

    def test_has_cache_delegates_to_store(self, handler, mock_store):
        """Test has_cache() asks the store about the handler's key."""
        mock_store.has.return_value = True

        assert handler.has_cache() is True
        mock_store.has.assert_called_once_with("GET-/blog/")

    def test_get_cache_miss(self, handler, mock_store):
        """Test get_cache() returns None on a miss."""
        assert handler.get_cache() is None
        mock_store.get.assert_called_once_with("GET-/blog/")

    def test_get_cache_hit(self, handler, mock_store):
        """Test get_cache() returns stored content."""
        mock_store.get.return_value = "<html>cached</html>"

        assert handler.get_cache() == "<html>cached</html>"

    def test_store_cache_success(self, handler, mock_store):
        """Test store_cache() writes under the key with configured TTL."""
        result = handler.store_cache("<html>page</html>")

        assert result is True
        mock_store.put.assert_called_once_with("GET-/blog/", "<html>page</html>", 300)

    def test_store_cache_returns_store_failure(self, handler, mock_store):
        """Test store_cache() passes a failed write through."""
        mock_store.put.return_value = False

        assert handler.store_cache("<html>page</html>") is False

    @pytest.mark.parametrize("content", ["", None, b""])
    def test_store_cache_empty_content(self, handler, mock_store, content):
        """Test empty content is never stored."""
        assert handler.store_cache(content) is False
        mock_store.put.assert_not_called()

    def test_store_cache_logs_with_logger(self, mock_store):
        """Test an injected logger is told about the cached page."""
        logger = MagicMock()
        handler = CacheHandler(mock_store, FlattenConfig(lifetime=60), "GET-/", logger)

        handler.store_cache("body")

        logger.info.assert_called_once_with("Caching page GET-/")

    def test_store_cache_with_stdlib_logger(self, mock_store, caplog):
        """Test a standard library logger at INFO level is accepted."""
        logger = logging.getLogger("flatten.tests.handler")
        logger.setLevel(logging.INFO)
        handler = CacheHandler(mock_store, FlattenConfig(lifetime=60), "GET-/", logger)

        with caplog.at_level(logging.INFO, logger="flatten.tests.handler"):
            assert handler.store_cache("body") is True

        assert "Caching page GET-/" in caplog.messages
        mock_store.put.assert_called_once_with("GET-/", "body", 60)

    def test_store_cache_without_logger(self, handler, mock_store):
        """Test storing works when no logger is injected."""
        assert handler.logger is None
        assert handler.store_cache("body") is True

    def test_empty_content_not_logged(self, mock_store):
        """Test nothing is logged when content is empty."""
        logger = MagicMock()
        handler = CacheHandler(mock_store, FlattenConfig(), "GET-/", logger)

        handler.store_cache("")

        logger.info.assert_not_called()

    def test_get_lifetime(self, handler):
        """Test lifetime comes from configuration."""
        assert handler.get_lifetime() == 300

    def test_get_lifetime_defaults_to_zero(self, mock_store):
        """Test a missing lifetime is zero."""
        handler = CacheHandler(mock_store, FlattenConfig(lifetime=None), "GET-/")

        assert handler.get_lifetime() == 0

    def test_get_lifetime_from_string(self, mock_store):
        """Test a numeric string lifetime is coerced to int."""
        handler = CacheHandler(mock_store, FlattenConfig(lifetime="120"), "GET-/")

        assert handler.get_lifetime() == 120


class TestCacheHandlerWithMemoryStore:
    """Test handler consistency against a real store."""

    def test_store_then_read(self):
        """Test a successful store is visible to has/get."""
        handler = CacheHandler(MemoryStore(), FlattenConfig(lifetime=60), "GET-/a/")

        assert handler.has_cache() is False
        assert handler.store_cache("<p>a</p>") is True
        assert handler.has_cache() is True
        assert handler.get_cache() == "<p>a</p>"

    def test_zero_lifetime_caches_nothing(self):
        """Test a zero lifetime does not cache forever."""
        handler = CacheHandler(MemoryStore(), FlattenConfig(lifetime=0), "GET-/a/")

        assert handler.store_cache("<p>a</p>") is False
        assert handler.has_cache() is False

    def test_handlers_do_not_share_keys(self):
        """Test two keys on one store are independent."""
        store = MemoryStore()
        config = FlattenConfig(lifetime=60)
        get_handler = CacheHandler(store, config, "GET-/a/")
        post_handler = CacheHandler(store, config, "POST-/a/")

        get_handler.store_cache("get body")

        assert post_handler.has_cache() is False
        assert get_handler.get_cache() == "get body"
