import pytest

from logo_cruncher.config import Settings


@pytest.fixture
def settings(tmp_path):
    settings = Settings(data_dir=tmp_path / "data", max_workers=4)
    settings.ensure_dirs()
    return settings
