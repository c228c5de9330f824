"""
Tests for a complete run: validation, parsing and sync
"""
import pytest

from kontent_sync.core.exceptions import MissingHeadersError, EmptyDataError, ConfigurationException, CsvReadError
from kontent_sync.core.settings import Environment, KontentSettings
from kontent_sync.services.csv_import.csv_import_service import CSVImportService
from tests.conftest import HEADER, FakeKontent, DEV_PROJECT


class TestCSVImportService:

    @pytest.mark.anyio
    async def test_import_file(self, kontent_settings, fake_kontent, write_csv):
        path = write_csv(f"{HEADER}\nAcme Corp,,,,,\nGlobex,Globex HK,,,,\n")
        service = CSVImportService(kontent_settings, transport=fake_kontent.transport)

        outcome = await service.import_file(path, Environment.DEV, "partner_list")

        assert outcome.processed_count == 2
        assert set(fake_kontent.items) == {"partner_list_acme_corp", "partner_list_globex"}

    @pytest.mark.anyio
    async def test_prod_targets_prod_project(self, kontent_settings, write_csv):
        fake = FakeKontent("prod-project")
        path = write_csv(f"{HEADER}\nAcme Corp,,,,,\n")
        service = CSVImportService(kontent_settings, transport=fake.transport)

        outcome = await service.import_file(path, Environment.PROD, "major_market_list")

        assert outcome.processed_count == 1
        assert "major_market_list_acme_corp" in fake.items
        assert fake.review

    @pytest.mark.anyio
    async def test_invalid_csv_makes_no_remote_call(self, kontent_settings, fake_kontent, write_csv):
        path = write_csv("default,zh-HK\nAcme,\n")
        service = CSVImportService(kontent_settings, transport=fake_kontent.transport)

        with pytest.raises(MissingHeadersError):
            await service.import_file(path, Environment.DEV, "partner_list")

        assert fake_kontent.calls == []

    @pytest.mark.anyio
    async def test_empty_csv_makes_no_remote_call(self, kontent_settings, fake_kontent, write_csv):
        path = write_csv(f"{HEADER}\n")
        service = CSVImportService(kontent_settings, transport=fake_kontent.transport)

        with pytest.raises(EmptyDataError):
            await service.import_file(path, Environment.DEV, "partner_list")

        assert fake_kontent.calls == []

    @pytest.mark.anyio
    async def test_missing_file(self, kontent_settings, fake_kontent, tmp_path):
        service = CSVImportService(kontent_settings, transport=fake_kontent.transport)

        with pytest.raises(CsvReadError):
            await service.import_file(str(tmp_path / "gone.csv"), Environment.DEV, "partner_list")

    @pytest.mark.anyio
    async def test_unconfigured_environment(self, fake_kontent, write_csv):
        settings = KontentSettings(kontent_dev_project_id=DEV_PROJECT, kontent_prod_project_id="")
        path = write_csv(f"{HEADER}\nAcme Corp,,,,,\n")
        service = CSVImportService(settings, transport=fake_kontent.transport)

        with pytest.raises(ConfigurationException):
            await service.import_file(path, Environment.PROD, "partner_list")

        assert fake_kontent.calls == []
