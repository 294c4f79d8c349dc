"""One-time MongoDB replica-set initialisation.

The mongod process is started with ``--replSet`` and refuses writes until
``rs.initiate`` has been called once. ``ensure_replica_set`` makes that call
safe to repeat on every ``up``: it waits for the server to answer pings,
asks for the current replica-set status and only initiates when the status
query fails.
"""

from __future__ import annotations

from collections.abc import Callable
import time

from devpods.utils.log_utils import info, ok, warn
from devpods.utils.podman import LivenessTimeoutError, RuntimeClient


PING_EVAL = "db.adminCommand('ping')"
STATUS_EVAL = "rs.status()"

LIVENESS_ATTEMPTS = 30
LIVENESS_DELAY = 2.0


def _mongosh(script: str) -> list[str]:
    return ["mongosh", "--quiet", "--eval", script]


def initiate_script(replica_set: str, host: str = "localhost:27017") -> str:
    return f"rs.initiate({{ _id: '{replica_set}', members: [{{ _id: 0, host: '{host}' }}] }})"


def wait_for_mongo(
    runtime: RuntimeClient,
    container: str,
    *,
    attempts: int = LIVENESS_ATTEMPTS,
    delay: float = LIVENESS_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Block until ``container`` answers a ping.

    Raises:
        LivenessTimeoutError: After ``attempts`` failed probes.
    """
    info("Waiting for MongoDB to be ready …")
    failures = 0
    while not runtime.exec(container, _mongosh(PING_EVAL)).ok:
        failures += 1
        if failures > attempts:
            raise LivenessTimeoutError("MongoDB did not become ready in time.")
        sleep(delay)


def ensure_replica_set(
    runtime: RuntimeClient,
    container: str,
    replica_set: str,
    *,
    attempts: int = LIVENESS_ATTEMPTS,
    delay: float = LIVENESS_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Initiate ``replica_set`` on ``container`` unless already initiated.

    A non-zero exit from ``rs.initiate`` is only a warning: another ``up``
    may have won the race.

    Returns:
        True if this call issued ``rs.initiate``.
    """
    wait_for_mongo(runtime, container, attempts=attempts, delay=delay, sleep=sleep)

    if runtime.exec(container, _mongosh(STATUS_EVAL)).ok:
        ok(f"Replica set: {replica_set} (already initialised)")
        return False

    result = runtime.exec(container, _mongosh(initiate_script(replica_set)))
    if result.ok:
        ok(f"Replica set: {replica_set}")
    else:
        warn("RS init non-zero (may already be set)")
    return True


__all__ = ["ensure_replica_set", "wait_for_mongo", "initiate_script"]
