"""
Per-product serialization of stock movements across threads and sessions
"""
from concurrent.futures import ThreadPoolExecutor
import threading

from polimarket.models import MovementType
from polimarket.services import BusinessFacade


def _run_concurrently(session_factory, locks, workers, job):
    barrier = threading.Barrier(workers, timeout=30)

    def run(n):
        db = session_factory()
        try:
            facade = BusinessFacade(db, locks=locks)
            barrier.wait()
            return job(facade, n)
        finally:
            db.close()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(run, range(workers)))


def test_concurrent_movements_never_share_stock_before(product, session_factory, locks, facade):
    per_worker = 10

    def job(worker_facade, n):
        seen = []
        for _ in range(per_worker):
            result = worker_facade.record_movement("P100", MovementType.INBOUND, n + 1, f"worker {n}")
            assert result.success, result.message
            seen.append(result.data.movement.stock_before)
        return seen

    results = _run_concurrently(session_factory, locks, 4, job)
    stock_befores = [b for worker in results for b in worker]

    assert len(stock_befores) == len(set(stock_befores))
    assert facade.current_stock("P100").data == 10 + per_worker * (1 + 2 + 3 + 4)

    audit = facade.verify_ledger("P100").data
    assert audit.movement_count == 1 + 4 * per_worker
    assert audit.is_consistent


def test_racing_outbounds_cannot_oversell(product, session_factory, locks, facade):
    def job(worker_facade, n):
        return worker_facade.record_movement("P100", MovementType.OUTBOUND, 6, f"order {n}")

    results = _run_concurrently(session_factory, locks, 2, job)

    assert sorted(r.success for r in results) == [False, True]
    failed = next(r for r in results if not r.success)
    assert failed.error_code == "INSUFFICIENT_STOCK"
    assert facade.current_stock("P100").data == 4
    assert facade.verify_ledger("P100").data.is_consistent


def test_mixed_deltas_sum_regardless_of_order(product, session_factory, locks, facade):
    def job(worker_facade, n):
        if n % 2:
            return worker_facade.record_movement("P100", MovementType.OUTBOUND, 3, "sale")
        return worker_facade.record_movement("P100", MovementType.INBOUND, 5, "restock")

    results = _run_concurrently(session_factory, locks, 6, job)

    assert all(r.success for r in results)
    assert facade.current_stock("P100").data == 10 + 3 * 5 - 3 * 3
    assert facade.verify_ledger("P100").data.chain_intact


def test_products_use_independent_locks(locks):
    assert locks.lock_for("P001") is locks.lock_for("P001")
    assert locks.lock_for("P001") is not locks.lock_for("P002")
