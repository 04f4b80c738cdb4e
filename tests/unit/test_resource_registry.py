"""Unit tests for ResourceRegistry service."""

from bddbrowser.services.resource_registry import ResourceRegistry


class TestResourceRegistryBasic:
    """Test basic registration and cleanup."""

    def test_register_and_cleanup_single_resource(self) -> None:
        """Test registering and cleaning up a single resource."""
        registry = ResourceRegistry()
        cleanup_called = []

        registry.register("page", "page-handle", cleanup_called.append, label="login")
        assert len(registry) == 1

        errors = registry.cleanup_all()

        assert cleanup_called == ["page-handle"]
        assert errors == []

    def test_cleanup_reverse_registration_order(self) -> None:
        """Test the page is closed before its context and the context before the browser."""
        registry = ResourceRegistry()
        order = []

        registry.register("browser", "b", lambda h: order.append("browser"))
        registry.register("context", "c", lambda h: order.append("context"))
        registry.register("page", "p", lambda h: order.append("page"))

        registry.cleanup_all()

        assert order == ["page", "context", "browser"]

    def test_cleanup_continues_on_exception(self) -> None:
        """Test cleanup continues even if a disposal raises exception."""
        registry = ResourceRegistry()
        order = []

        def failing_close(handle: str) -> None:
            order.append("page")
            raise RuntimeError("Target page, context or browser has been closed")

        registry.register("context", "c", lambda h: order.append("context"), label="c")
        registry.register("page", "p", failing_close, label="p")

        errors = registry.cleanup_all()

        assert order == ["page", "context"]
        assert len(errors) == 1
        assert "page 'p'" in errors[0]

    def test_cleanup_is_idempotent(self) -> None:
        """Test a second cleanup disposes nothing."""
        registry = ResourceRegistry()
        calls = []
        registry.register("page", "p", calls.append)

        registry.cleanup_all()
        registry.cleanup_all()

        assert calls == ["p"]
        assert len(registry) == 0

    def test_empty_registry_cleanup(self) -> None:
        """Test cleanup on empty registry doesn't raise."""
        assert ResourceRegistry().cleanup_all() == []
