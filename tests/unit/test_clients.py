"""Tests for the region-keyed client factory."""

from __future__ import annotations

from unittest.mock import MagicMock

from storage_area_provisioner.services.aws.clients import ClientFactory


def _factory() -> tuple[ClientFactory, MagicMock]:
    session = MagicMock()
    session.client.side_effect = lambda service, region_name=None, config=None: MagicMock(
        name=f"{service}-{region_name}"
    )
    return ClientFactory(session=session), session


def test_clients_cached_per_region():
    factory, session = _factory()

    first = factory.s3("eu-west-1")
    second = factory.s3("eu-west-1")
    other = factory.s3("us-east-1")

    assert first is second
    assert first is not other
    assert session.client.call_count == 2


def test_services_cached_separately():
    factory, session = _factory()

    assert factory.s3("eu-west-1") is not factory.kms("eu-west-1")
    calls = [(c.args[0], c.kwargs["region_name"]) for c in session.client.call_args_list]
    assert calls == [("s3", "eu-west-1"), ("kms", "eu-west-1")]


def test_account_id_uses_single_sts_client():
    factory, session = _factory()
    sts = factory.sts()
    sts.get_caller_identity.return_value = {"Account": "123456789012"}

    assert factory.account_id() == "123456789012"
    assert factory.account_id() == "123456789012"
    assert session.client.call_count == 1


def test_client_config_passed():
    factory, session = _factory()

    factory.s3("eu-west-1")

    config = session.client.call_args.kwargs["config"]
    assert config.signature_version == "s3v4"
