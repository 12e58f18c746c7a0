"""
Tests for application settings
"""

import pytest
from pydantic import ValidationError

from app.config import Settings
from app.database import sqlalchemy_url


class TestSettings:

    def test_time_of_day_source_choices(self):
        assert Settings(time_of_day_source="date").time_of_day_source == "date"
        assert Settings().time_of_day_source == "overlap_start"

    def test_unknown_time_of_day_source_rejected(self):
        with pytest.raises(ValidationError):
            Settings(time_of_day_source="overlap-start")


class TestDatabaseUrl:

    def test_postgres_url_uses_psycopg_driver(self):
        assert sqlalchemy_url("postgresql://u:p@db/app") == "postgresql+psycopg://u:p@db/app"

    def test_other_urls_untouched(self):
        assert sqlalchemy_url("sqlite://") == "sqlite://"
        assert sqlalchemy_url("postgresql+psycopg://db/app") == "postgresql+psycopg://db/app"
