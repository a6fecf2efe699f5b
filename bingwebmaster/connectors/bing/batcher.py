"""BingWebmaster — Submission Batcher.

Applies a single-item submission to many inputs and collects one outcome
per input. A failing item never stops the batch.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence

from bingwebmaster.models.normalized_models import SubmissionOutcome
from bingwebmaster.core.logging import get_logger

logger = get_logger("bing.batcher")

SubmitOne = Callable[[str], SubmissionOutcome]


def _run_one(item: str, submit_one: SubmitOne, site_url: str) -> SubmissionOutcome:
    try:
        return submit_one(item)
    except Exception as e:
        logger.warning(f"Submission of {item} failed: {e}")
        return SubmissionOutcome(
            success=False,
            message=str(e),
            site_url=site_url,
            submitted_url=item,
            data=getattr(e, "payload", None),
        )


def submit_all(
    items: Sequence[str],
    submit_one: SubmitOne,
    *,
    site_url: str = "",
    max_workers: int = 1,
) -> List[SubmissionOutcome]:
    """Submit every item; outcomes are returned in input order.

    With ``max_workers > 1`` items run on a bounded thread pool, but the
    result list is still ordered by input index, not completion order.
    """
    items = list(items)
    if max_workers <= 1 or len(items) <= 1:
        outcomes = [_run_one(item, submit_one, site_url) for item in items]
    else:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as pool:
            outcomes = list(pool.map(lambda item: _run_one(item, submit_one, site_url), items))

    failed = sum(1 for o in outcomes if not o.success)
    logger.info(f"Submitted {len(outcomes)} items ({failed} failed)")
    return outcomes
