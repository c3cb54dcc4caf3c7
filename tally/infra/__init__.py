"""tally.infra — configuration and health checks."""

from tally.infra.config import DEFAULT_QUEUE_CAPACITY as DEFAULT_QUEUE_CAPACITY
from tally.infra.config import DEFAULT_SYSTEM_ACCOUNT_ID as DEFAULT_SYSTEM_ACCOUNT_ID
from tally.infra.config import DEFAULT_TASK_QUEUE as DEFAULT_TASK_QUEUE
from tally.infra.config import LedgerConfig as LedgerConfig
from tally.infra.config import TemporalWorkerConfig as TemporalWorkerConfig
from tally.infra.config import WorkerConfig as WorkerConfig
from tally.infra.health import HealthCheckable as HealthCheckable
from tally.infra.health import HealthStatus as HealthStatus
from tally.infra.health import SystemHealth as SystemHealth
from tally.infra.health import liveness_check as liveness_check
from tally.infra.health import readiness_check as readiness_check
