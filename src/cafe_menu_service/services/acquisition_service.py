"""Acquisition orchestrator for menu data."""

import logging
import time

from cafe_menu_service.adapters.base_adapter import MenuSourceAdapter
from cafe_menu_service.exceptions import AcquisitionFailure
from cafe_menu_service.extraction.html_extractor import dedupe_items, is_corrupted
from cafe_menu_service.models.menu_models import MenuSnapshot, MenuSource
from cafe_menu_service.observability.decorators import traced
from cafe_menu_service.observability.metrics import (
    record_acquisition_duration,
    record_stage_attempt,
)

logger = logging.getLogger(__name__)


class MenuAcquisitionService:
    """Runs acquisition adapters in priority order until one yields a usable menu.

    Each adapter is attempted exactly once per run. Adapter failures, empty
    results and corrupted results are logged and swallowed here; only a fully
    exhausted run raises.
    """

    def __init__(self, adapters: list[MenuSourceAdapter]) -> None:
        """Initialize the MenuAcquisitionService.

        Args:
            adapters: Adapters in the order they should be tried
        """
        if not adapters:
            raise ValueError("At least one acquisition adapter must be provided")
        self.adapters = adapters

    @traced("acquire_menu", service_name="cafe-menu-svc")
    async def acquire(self) -> MenuSnapshot:
        """Acquire a fresh menu snapshot.

        Returns:
            Snapshot from the first adapter producing a non-empty, non-corrupted result

        Raises:
            AcquisitionFailure: If every adapter failed or produced unusable data
        """
        started = time.perf_counter()
        failures: list[str] = []

        for adapter in self.adapters:
            stage = adapter.source.value
            logger.info(f"Attempting menu acquisition via {stage}")

            try:
                items = await adapter.fetch_items()
            except Exception as e:
                logger.warning(f"Stage {stage} raised {type(e).__name__}: {e}")
                record_stage_attempt(stage, "error")
                failures.append(f"{stage}: {e}")
                continue

            if not items:
                logger.warning(f"Stage {stage} produced no menu items")
                record_stage_attempt(stage, "empty")
                failures.append(f"{stage}: no items found")
                continue

            if is_corrupted(items):
                logger.warning(
                    f"Stage {stage} produced {len(items)} items containing script or config text, discarding"
                )
                record_stage_attempt(stage, "corrupted")
                failures.append(f"{stage}: extracted non-menu content")
                continue

            snapshot = MenuSnapshot.from_items(dedupe_items(items), source=adapter.source)
            record_stage_attempt(stage, "success")
            record_acquisition_duration(stage, time.perf_counter() - started)
            logger.info(
                f"Acquired {snapshot.item_count} items in {len(snapshot.categories)} categories via {stage}"
            )
            return snapshot

        record_acquisition_duration(MenuSource.NONE.value, time.perf_counter() - started)
        message = "Unable to extract valid menu items from any source (" + "; ".join(failures) + ")"
        logger.error(message)
        raise AcquisitionFailure(message, failures=failures)
