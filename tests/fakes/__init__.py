"""Test fakes for issue tracker testing."""

from tests.fakes.fake_adapter import FakeAdapter

__all__ = ["FakeAdapter"]
