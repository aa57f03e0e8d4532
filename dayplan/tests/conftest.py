import pytest

from dayplan.api.app import app
from dayplan.api.dependencies import get_container


@pytest.fixture
def clean_app():
    """The FastAPI app with overrides and container singletons reset."""
    app.dependency_overrides = {}
    get_container().reset()
    yield app
    app.dependency_overrides = {}
    get_container().reset()
