"""
CSV Import Service - main orchestration of a run.

Validate the file, resolve the target, then stream the rows into the
Kontent sync.
"""
from __future__ import annotations

import logging
from typing import Optional

from .csv_validator import CSVValidator
from .csv_parser import parse_rows
from kontent_sync.core.locales import locale_codes
from kontent_sync.core.settings import Environment, KontentSettings, get_kontent_settings
from kontent_sync.services.kontent.kontent_client import KontentClient
from kontent_sync.services.sync.content_sync_service import ContentSyncService
from kontent_sync.services.sync.models import RunContext, SyncOutcome

logger = logging.getLogger(__name__)


class CSVImportService:
    """
    Runs one upload end to end.

    Workflow:
    1. Resolve the RunContext for the environment
    2. Validate the CSV (first pass, no remote call on failure)
    3. Parse rows (second pass) and sync them into Kontent
    4. Return the SyncOutcome
    """

    def __init__(self, settings: Optional[KontentSettings] = None, transport=None):
        self.settings = settings or get_kontent_settings()
        self.transport = transport
        self.locales = locale_codes()
        self.validator = CSVValidator(self.locales)

    async def import_file(self, file_path: str, environment: Environment, content_type: str) -> SyncOutcome:
        """
        Import a CSV into Kontent.

        Args:
            file_path: CSV on local disk
            environment: dev or prod
            content_type: Codename of the content type of the created items

        Returns:
            SyncOutcome of the run

        Raises:
            ConfigurationException: environment not configured
            CsvValidationException: bad CSV structure, nothing was sent to Kontent
            CsvReadError: the file could not be read
        """
        context = RunContext.from_settings(environment, content_type, self.settings)
        logger.info(f"Processing CSV file {file_path} for {context.environment.value}/{content_type}")

        self.validator.validate(file_path)

        async with KontentClient(
            context,
            timeout=self.settings.kontent_request_timeout,
            transport=self.transport,
        ) as client:
            sync_service = ContentSyncService(client, self.locales)
            return await sync_service.sync(parse_rows(file_path, self.locales), context)
