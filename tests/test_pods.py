from __future__ import annotations

from pathlib import Path

import pytest

from devpods.config import Credentials
from devpods.pods import ALL_PODS, Pod, UnknownPodError, resolve_pods


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("pg", Pod.PG),
        ("postgres", Pod.PG),
        ("mongo", Pod.MONGO),
        ("mongodb", Pod.MONGO),
        ("redis", Pod.REDIS),
        ("mail", Pod.MAIL),
        ("mailpit", Pod.MAIL),
        ("seq", Pod.SEQ),
        ("rmq", Pod.RMQ),
        ("rabbitmq", Pod.RMQ),
        ("nats", Pod.NATS),
        ("dev-nats-pod", Pod.NATS),
        ("PG", Pod.PG),
    ],
)
def test_resolve_single_pod(target: str, expected: Pod) -> None:
    assert resolve_pods(target) == [expected]


def test_resolve_all_keeps_display_order() -> None:
    assert [pod.pod_name for pod in resolve_pods("all")] == [
        "dev-pg-pod",
        "dev-mongo-pod",
        "dev-redis-pod",
        "dev-mail-pod",
        "dev-seq-pod",
        "dev-rmq-pod",
        "dev-nats-pod",
    ]


def test_unknown_alias_lists_valid_choices() -> None:
    with pytest.raises(UnknownPodError) as excinfo:
        resolve_pods("notapod")

    message = str(excinfo.value)
    assert "'notapod'" in message
    assert "pg" in message
    assert message.endswith("all")


def test_published_ports() -> None:
    ports = {pod: pod.definition.ports for pod in ALL_PODS}
    assert ports[Pod.PG] == ("5432:5432", "8081:8081")
    assert ports[Pod.MONGO] == ("27017:27017", "8082:8081")
    assert ports[Pod.REDIS] == ("6379:6379", "8083:8001")
    assert ports[Pod.MAIL] == ("1025:1025", "8025:8025")
    assert ports[Pod.SEQ] == ("5341:80",)
    assert ports[Pod.RMQ] == ("5672:5672", "15672:15672")
    assert ports[Pod.NATS] == ("4222:4222", "8222:8222", "6222:6222")


def test_container_names_are_prefixed_by_pod(tmp_path: Path) -> None:
    names = [
        service.spec.name
        for pod in ALL_PODS
        for service in pod.services(Credentials(), tmp_path / pod.pod_name)
    ]
    assert names == [
        "dev-pg-pod-postgres",
        "dev-pg-pod-pgweb",
        "dev-mongo-pod-mongodb",
        "dev-mongo-pod-mongoexpress",
        "dev-redis-pod-redis",
        "dev-redis-pod-redisinsight",
        "dev-mail-pod-mailpit",
        "dev-seq-pod-seq",
        "dev-rmq-pod-rabbitmq",
        "dev-nats-pod-nats",
    ]


def test_every_service_image_is_declared(tmp_path: Path) -> None:
    for pod in ALL_PODS:
        for service in pod.services(Credentials(), tmp_path):
            assert service.spec.image in pod.definition.images


def test_credentials_flow_into_container_env(tmp_path: Path) -> None:
    creds = Credentials(pg_user="alice", pg_pass="s3cret", pg_db="shop")
    postgres, pgweb = Pod.PG.services(creds, tmp_path)

    assert postgres.spec.env["POSTGRES_USER"] == "alice"
    assert postgres.spec.env["POSTGRES_PASSWORD"] == "s3cret"
    assert "alice:s3cret@localhost:5432/shop" in pgweb.spec.env["DATABASE_URL"]


def test_mongo_is_bootstrapped_instead_of_health_waited(tmp_path: Path) -> None:
    mongodb, express = Pod.MONGO.services(Credentials(mongo_rs="rs9"), tmp_path)

    assert mongodb.replica_set
    assert not mongodb.waits_for_health
    assert mongodb.spec.args[:2] == ("--replSet", "rs9")
    assert not express.replica_set


def test_endpoint_summary_uses_replica_set_name() -> None:
    assert "replicaSet=rs9" in Pod.MONGO.endpoint_summary(Credentials(mongo_rs="rs9"))
