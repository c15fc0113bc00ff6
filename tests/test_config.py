import pytest
from pydantic import ValidationError

from src.academy_ledger.common.config import Settings


class TestSettings:

    @pytest.mark.parametrize("missing", ["SECRET_KEY", "FIRST_ADMIN_PASSWORD"])
    def test_credentials_have_no_default(self, monkeypatch, missing):
        monkeypatch.delenv(missing, raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_configured_from_environment(self, monkeypatch):
        monkeypatch.setenv("SECRET_KEY", "k")
        monkeypatch.setenv("FIRST_ADMIN_PASSWORD", "p")
        settings = Settings(_env_file=None)
        assert settings.SECRET_KEY == "k"
        assert settings.FIRST_ADMIN_PASSWORD == "p"
