"""
Content Sync Service - drives the Kontent workflow for every CSV row.

For each row: look the item up by codename, and if it does not exist
create it, add one language variant per locale, move the variants to
review (prod only) and publish them. A failing row is recorded and the
run moves on to the next one.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .models import RunContext, SyncOutcome, SyncOutcomeBuilder, ItemSyncState
from kontent_sync.core.exceptions import KontentApiException
from kontent_sync.core.locales import locale_codes, get_language_id
from kontent_sync.services.csv_import.entity_mapper import EntityMapper
from kontent_sync.services.csv_import.models import CsvRow, ItemIdentity
from kontent_sync.services.kontent.kontent_client import KontentClient

logger = logging.getLogger(__name__)


class ItemSyncError(Exception):
    """Wraps the Kontent error that stopped an item, with the state it had reached"""

    def __init__(self, state: ItemSyncState, error: KontentApiException):
        self.state = state
        self.error = error
        super().__init__(str(error))


class ContentSyncService:
    """
    Synchronize parsed CSV rows into Kontent.

    Rows are processed one at a time, remote calls strictly in order.
    """

    def __init__(self, client: KontentClient, locales: Optional[List[str]] = None):
        self.client = client
        self.locales = list(locales) if locales is not None else locale_codes()

    async def sync(self, rows: Iterable[CsvRow], context: RunContext) -> SyncOutcome:
        """
        Sync every row and aggregate the outcome.

        Args:
            rows: Parsed rows, consumed once in order
            context: Target environment and content type of the run

        Returns:
            SyncOutcome with counters and the failed rows in input order
        """
        outcome = SyncOutcomeBuilder()
        logger.info(
            f"Starting sync to {context.environment.value} project {context.project_id} "
            f"(content type: {context.content_type})"
        )

        for row in rows:
            identity = EntityMapper.identity(row, context.content_type)
            try:
                await self._sync_row(row, identity, context)
                outcome.processed()
            except ItemSyncError as e:
                reason = e.error.reason
                logger.error(
                    f"Row {row.record_number} '{identity.name}' ({identity.codename}) "
                    f"{ItemSyncState.FAILED.value} after state {e.state.value}: {reason}"
                )
                outcome.unprocessed(identity.name, reason, e.state)

        result = outcome.build()
        logger.info(
            f"Sync completed: {result.processed_count} processed, "
            f"{result.unprocessed_count} unprocessed"
        )
        return result

    async def _sync_row(self, row: CsvRow, identity: ItemIdentity, context: RunContext) -> None:
        try:
            existing = await self.client.find_item(identity.codename)
        except KontentApiException as e:
            raise ItemSyncError(ItemSyncState.PENDING, e)

        if existing is not None:
            logger.info(f"Item '{identity.codename}' already exists, skipping")
            return

        await self._create_item(row, identity, context)

    async def _create_item(self, row: CsvRow, identity: ItemIdentity, context: RunContext) -> None:
        """Create the item and walk every variant through the workflow"""
        state = ItemSyncState.PENDING
        try:
            item = await self.client.create_item(identity.name, identity.codename, context.content_type)
            state = ItemSyncState.CREATED
            item_id = item["id"]
            logger.info(f"Created item '{identity.codename}' ({item_id})")

            review_step_id = None
            if context.is_prod:
                review_step_id = await self.client.fetch_review_step_id()

            for locale in self.locales:
                language_id = get_language_id(locale)
                if not language_id:
                    continue

                state = ItemSyncState.CREATED
                elements = EntityMapper.map_elements(row, locale)
                await self.client.upsert_variant(item_id, language_id, elements)
                state = ItemSyncState.VARIANT_ADDED

                if review_step_id is not None:
                    await self.client.transition_to_review(item_id, language_id, review_step_id)
                    state = ItemSyncState.IN_REVIEW

                await self.client.publish_variant(item_id, language_id)
                state = ItemSyncState.PUBLISHED
                logger.debug(f"Published '{identity.codename}' in {language_id}")
        except KontentApiException as e:
            raise ItemSyncError(state, e)
