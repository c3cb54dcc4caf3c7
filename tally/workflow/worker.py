"""Host the ledger activities on a Temporal task queue.

Usage::

    import asyncio
    from tally.ledger import Ledger
    from tally.workflow.worker import run_worker

    asyncio.run(run_worker(Ledger()))
"""

from __future__ import annotations

from temporalio.client import Client
from temporalio.worker import Worker

from tally.core.result import Err
from tally.infra.config import TemporalWorkerConfig, WorkerConfig
from tally.ledger.engine import Ledger
from tally.worker.ledger_worker import LedgerWorker
from tally.workflow.activities import LedgerActivities
from tally.workflow.converter import TALLY_DATA_CONVERTER


async def run_worker(
    ledger: Ledger,
    config: TemporalWorkerConfig | None = None,
    *,
    worker_config: WorkerConfig | None = None,
) -> None:
    """Connect to Temporal and serve ledger activities until interrupted."""
    config = config if config is not None else TemporalWorkerConfig()
    ledger_worker = LedgerWorker(ledger, worker_config)
    match ledger_worker.start():
        case Err(error):
            raise RuntimeError(error.message)
    try:
        client = await Client.connect(
            config.target_host, namespace=config.namespace,
            data_converter=TALLY_DATA_CONVERTER,
        )
        worker = Worker(
            client,
            task_queue=config.task_queue,
            activities=LedgerActivities(ledger, ledger_worker).all(),
        )
        await worker.run()
    finally:
        await ledger_worker.stop()
