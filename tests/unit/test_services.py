from __future__ import annotations

import threading

import pytest

from ignore_lens.config import Settings
from ignore_lens.engine.pipeline import evaluate_lines
from ignore_lens.models.schemas import EvaluateRequest, EvaluateResponse
from ignore_lens.services import evaluation as evaluation_module
from ignore_lens.services.cache import EvaluationCache, snapshot_key
from ignore_lens.services.evaluation import EvaluationService
from ignore_lens.services.generation import GenerationTracker, ResultStore
from ignore_lens.services.metrics import StatsTracker


def make_service(**overrides) -> EvaluationService:
    settings = Settings(**overrides)
    return EvaluationService(
        settings,
        cache=EvaluationCache(settings.result_cache_ttl_s, settings.result_cache_size),
        results=ResultStore[EvaluateResponse](),
        stats=StatsTracker(),
    )


def test_cache_honours_ttl():
    now = [0.0]

    def fake_time() -> float:
        return now[0]

    cache = EvaluationCache(ttl_seconds=10, max_size=4, time_func=fake_time)
    report = evaluate_lines(["*.js"], ["a.js"])
    cache.put("key", report)
    assert cache.get("key") is report
    now[0] = 11
    assert cache.get("key") is None
    assert len(cache) == 0


def test_cache_evicts_least_recently_used():
    cache = EvaluationCache(ttl_seconds=60, max_size=2)
    reports = {key: evaluate_lines([f"{key}.txt"], []) for key in "abc"}

    cache.put("a", reports["a"])
    cache.put("b", reports["b"])
    assert cache.get("a") is reports["a"]  # "b" becomes least recent
    cache.put("c", reports["c"])

    assert cache.get("b") is None
    assert cache.get("a") is reports["a"]
    assert cache.get("c") is reports["c"]


def test_cache_disabled_with_zero_size():
    cache = EvaluationCache(ttl_seconds=60, max_size=0)
    cache.put("a", evaluate_lines(["*.js"], []))

    assert cache.get("a") is None


def test_snapshot_key_ignores_candidate_order():
    first = snapshot_key("*.js", ["a.js", "b.js"])
    second = snapshot_key("*.js", ["b.js", "a.js", "a.js"])

    assert first == second
    assert snapshot_key("*.ts", ["a.js", "b.js"]) != first
    assert snapshot_key("*.js", ["a.js", "b.js"], "pkg") != first


def test_generation_tokens_are_monotonic_per_document():
    tracker = GenerationTracker()

    assert tracker.begin("doc") == 1
    assert tracker.begin("doc") == 2
    assert tracker.begin("other") == 1
    assert tracker.is_current("doc", 2)
    assert not tracker.is_current("doc", 1)


def test_stale_result_is_not_committed():
    store: ResultStore[str] = ResultStore()
    older = store.begin("doc")
    newer = store.begin("doc")

    assert store.commit("doc", newer, "new") is True
    assert store.commit("doc", older, "old") is False
    assert store.get("doc") == "new"


def test_stale_result_dropped_even_before_newer_commits():
    store: ResultStore[str] = ResultStore()
    older = store.begin("doc")
    store.begin("doc")

    assert store.commit("doc", older, "old") is False
    assert store.get("doc") is None


def test_concurrent_passes_keep_the_newest_result():
    store: ResultStore[int] = ResultStore()
    tokens = [store.begin("doc") for _ in range(8)]
    barrier = threading.Barrier(len(tokens))

    def worker(token: int) -> None:
        barrier.wait()
        store.commit("doc", token, token)

    threads = [threading.Thread(target=worker, args=(token,)) for token in tokens]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.get("doc") == tokens[-1]


def test_stats_tracker_snapshot():
    stats = StatsTracker()
    stats.record_evaluation(10, 3)
    stats.increment_stale()
    stats.increment_cache_hit()

    snapshot = stats.snapshot()
    assert snapshot["evaluate_total"] == 1
    assert snapshot["patterns_total"] == 3
    assert snapshot["evaluate_stale"] == 1
    assert snapshot["cache_hits"] == 1
    assert snapshot["avg_evaluate_ms"] == pytest.approx(0.1)


def test_service_evaluates_and_commits():
    service = make_service()
    req = EvaluateRequest(
        document_id="doc",
        content="dist/\n!dist/secret.js",
        candidates=["dist/a.js", "dist/secret.js"],
    )

    response = service.evaluate(req)

    assert response.generation == 1
    assert response.stale is False
    assert response.cache_hit is False
    assert [o.blocked_count for o in response.outcomes] == [0, 1]
    assert response.summary.total_ignored == 2
    assert response.summary.total_blocked == 1
    assert response.summary.ignored_dir_prefixes == ["dist/"]
    assert len(response.decorations) == 2
    assert service.latest("doc") == response


def test_service_reuses_cached_report():
    service = make_service()
    req = EvaluateRequest(document_id="doc", content="*.js", candidates=["a.js"])

    service.evaluate(req)
    second = service.evaluate(req)

    assert second.cache_hit is True
    assert second.generation == 2
    assert service.stats.snapshot()["cache_hits"] == 1


def test_service_marks_superseded_pass_as_stale(monkeypatch):
    service = make_service()
    real_evaluate = evaluation_module.evaluate_content

    def evaluate_while_newer_pass_starts(content, candidates, *, strict=False):
        service.results.begin("doc")
        return real_evaluate(content, candidates, strict=strict)

    monkeypatch.setattr(evaluation_module, "evaluate_content", evaluate_while_newer_pass_starts)

    response = service.evaluate(EvaluateRequest(document_id="doc", content="*.js", candidates=["a.js"]))

    assert response.stale is True
    assert service.latest("doc") is None
    assert service.stats.snapshot()["evaluate_stale"] == 1


def test_service_scopes_and_normalizes_candidates():
    service = make_service()
    req = EvaluateRequest(
        content="*.log",
        candidates=["pkg\\debug.log", "root.log"],
        base_dir="pkg",
    )

    response = service.evaluate(req)

    assert response.summary.total_ignored == 1


def test_service_omits_decorations_on_request():
    service = make_service()

    response = service.evaluate(
        EvaluateRequest(content="*.js", candidates=[], include_decorations=False)
    )

    assert response.decorations == []
