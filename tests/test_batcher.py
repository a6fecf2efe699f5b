"""Tests for the submission batcher."""

import threading
import time

import pytest

from bingwebmaster.connectors.bing.batcher import submit_all
from bingwebmaster.core.errors import FatalTransportError
from bingwebmaster.models.normalized_models import SubmissionOutcome

SITE = "https://example.com"
SITEMAPS = [
    "https://example.com/sitemap-1.xml",
    "https://example.com/sitemap-2.xml",
    "https://example.com/sitemap-3.xml",
]


def _ok(item: str) -> SubmissionOutcome:
    return SubmissionOutcome(
        success=True, message="Sitemap submitted successfully", site_url=SITE, submitted_url=item
    )


class TestSubmitAll:
    def test_failure_in_the_middle_does_not_abort(self):
        calls = []

        def submit_one(item):
            calls.append(item)
            if item == SITEMAPS[1]:
                raise FatalTransportError(
                    "Bing API error 400", status_code=400, payload={"Message": "Invalid sitemap"}
                )
            return _ok(item)

        outcomes = submit_all(SITEMAPS, submit_one, site_url=SITE)

        assert calls == SITEMAPS
        assert [o.success for o in outcomes] == [True, False, True]
        assert [o.submitted_url for o in outcomes] == SITEMAPS
        assert outcomes[1].site_url == SITE
        assert outcomes[1].data == {"Message": "Invalid sitemap"}

    def test_failed_outcome_returned_by_submit_one_is_kept(self):
        failed = SubmissionOutcome(success=False, message="Failed to submit sitemap")
        outcomes = submit_all(["x"], lambda item: failed)
        assert outcomes == [failed]

    def test_empty_input(self):
        assert submit_all([], _ok) == []

    def test_accepts_any_iterable_sequence(self):
        outcomes = submit_all(tuple(SITEMAPS), _ok)
        assert len(outcomes) == 3

    @pytest.mark.parametrize("max_workers", [2, 3, 8])
    def test_parallel_results_follow_input_order(self, max_workers):
        delays = {item: 0.03 * (len(SITEMAPS) - i) for i, item in enumerate(SITEMAPS)}

        def slow(item):
            time.sleep(delays[item])
            return _ok(item)

        outcomes = submit_all(SITEMAPS, slow, max_workers=max_workers)
        assert [o.submitted_url for o in outcomes] == SITEMAPS

    def test_parallel_worker_count_is_bounded(self):
        active = 0
        peak = 0
        lock = threading.Lock()

        def tracked(item):
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.02)
            with lock:
                active -= 1
            return _ok(item)

        outcomes = submit_all([f"u{i}" for i in range(8)], tracked, max_workers=2)
        assert len(outcomes) == 8
        assert peak <= 2
