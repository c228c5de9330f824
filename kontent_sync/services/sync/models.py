"""
Data models for the Kontent synchronization run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Dict, Any, Optional, Tuple

from kontent_sync.core.exceptions import ConfigurationException
from kontent_sync.core.settings import Environment, KontentSettings


@dataclass(frozen=True)
class RunContext:
    """
    Target of one run, resolved once from settings and passed explicitly.

    Attributes:
        environment: dev or prod
        project_id: Kontent project (environment) id
        content_type: Codename of the content type items are created with
        base_url: Management API base URL
        api_key: Management API key
    """
    environment: Environment
    project_id: str
    content_type: str
    base_url: str
    api_key: str = field(repr=False)

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PROD

    @property
    def project_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.project_id}/"

    @classmethod
    def from_settings(
        cls,
        environment: Environment,
        content_type: str,
        settings: KontentSettings
    ) -> RunContext:
        """
        Resolve the project of an environment.

        Raises:
            ConfigurationException: project id or API key not configured
        """
        environment = Environment(environment)
        project_id = settings.project_id_for(environment)
        api_key = settings.api_key_for(environment)

        missing = []
        if not project_id:
            missing.append(f"KONTENT_{environment.value.upper()}_PROJECT_ID")
        if not api_key:
            missing.append(f"KONTENT_{environment.value.upper()}_MANAGEMENT_API_KEY")
        if missing:
            raise ConfigurationException(
                f"Kontent environment '{environment.value}' is not configured",
                {"missing_settings": missing}
            )

        return cls(
            environment=environment,
            project_id=project_id,
            content_type=content_type,
            base_url=settings.base_url_for(environment),
            api_key=api_key,
        )


class ItemSyncState(str, Enum):
    """Steps of the per-item workflow, in order"""
    PENDING = "pending"
    CREATED = "created"
    VARIANT_ADDED = "variant_added"
    IN_REVIEW = "in_review"
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass(frozen=True)
class UnprocessedRecord:
    """
    A row that could not be synced.

    Attributes:
        name: Item name of the row
        reason: Human readable failure reason
        last_state: Last state the item reached before failing
        state: Terminal state of the item
    """
    name: str
    reason: str
    last_state: ItemSyncState = ItemSyncState.PENDING
    state: ItemSyncState = ItemSyncState.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "reason": self.reason}


@dataclass(frozen=True)
class SyncOutcome:
    """
    Result of a complete run.

    Attributes:
        processed_count: Items that already existed or were fully synced
        unprocessed_count: Items whose sync failed
        unprocessed_records: Failures in input row order
        started_at: Timestamp run start
        completed_at: Timestamp run end
    """
    processed_count: int = 0
    unprocessed_count: int = 0
    unprocessed_records: Tuple[UnprocessedRecord, ...] = ()
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the run result returned by the upload endpoint"""
        return {
            "processedCount": self.processed_count,
            "unprocessedCount": self.unprocessed_count,
            "unprocessedRecords": [record.to_dict() for record in self.unprocessed_records],
        }


class SyncOutcomeBuilder:
    """Accumulates row outcomes during a run; build() freezes them"""

    def __init__(self):
        self.started_at = datetime.now()
        self.processed_count = 0
        self._failures: List[UnprocessedRecord] = []

    def processed(self) -> None:
        self.processed_count += 1

    def unprocessed(self, name: str, reason: str, last_state: ItemSyncState) -> None:
        self._failures.append(UnprocessedRecord(name=name, reason=reason, last_state=last_state))

    def build(self) -> SyncOutcome:
        return SyncOutcome(
            processed_count=self.processed_count,
            unprocessed_count=len(self._failures),
            unprocessed_records=tuple(self._failures),
            started_at=self.started_at,
            completed_at=datetime.now(),
        )
