import pytest

from subnetcheck.config import AnalyzerSettings, set_settings


@pytest.fixture(autouse=True)
def default_settings():
    settings = AnalyzerSettings()
    set_settings(settings)
    yield settings
    set_settings(None)
