# tests/conftest.py
import pytest

from drupal.jsonapi.core.options import ResolverOptions
from drupal.jsonapi.core.resolver import DrupalJsonApi
from tests.helpers.fakes import FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def api(transport: FakeTransport) -> DrupalJsonApi:
    return DrupalJsonApi(transport, ResolverOptions())
