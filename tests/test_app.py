import pytest
from streamlit.testing.v1 import AppTest

from presentation import user_error_message
from errors import ConfigurationError


@pytest.fixture
def app(monkeypatch):
    monkeypatch.delenv("NREL_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_PLACES_API_KEY", raising=False)
    return AppTest.from_file("../app.py", default_timeout=30)


class TestCityLinks:
    def test_home_without_link(self, app):
        app.run()
        assert not app.exception
        assert app.title[0].value == "How much will solar save you?"

    def test_city_slug_opens_calculator(self, app):
        app.query_params["city"] = "phoenix-az"
        app.run()
        assert not app.exception
        assert app.header[0].value == "Solar Calculator for Phoenix, Arizona"
        # No key in the test environment, so the data fetch reports configuration
        assert app.error[0].value == user_error_message(ConfigurationError("x"))

    def test_unknown_slug_shows_not_found(self, app):
        app.query_params["city"] = "atlantis-zz"
        app.run()
        assert not app.exception
        assert app.header[0].value == "Solar Calculator"
        assert "atlantis-zz" in app.error[0].value
