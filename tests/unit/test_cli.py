import json
import os

from parcel_tracking_proxy import cli
from parcel_tracking_proxy.errors import ProviderUnavailableError
from parcel_tracking_proxy.models import ShipmentResult
from parcel_tracking_proxy.resolution.service import TrackingService


def run_cli(args):
    return cli.main(args)


def _empty_env_file(tmp_path):
    f = tmp_path / "empty.env"
    f.write_text("")
    return str(f)


def test_lookup_happy_path(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("TRACK17_API_KEY", "k")

    def fake_lookup(self, request):
        return ShipmentResult(
            tracking_id=request.tracking_id, carrier_name="China Post", carrier_slug="china-post",
            status="InTransit", origin="CN", destination="IT", events=(), provider="17track",
        )

    monkeypatch.setattr(TrackingService, "lookup", fake_lookup)

    code = run_cli(["--no-console", "--env-file", _empty_env_file(tmp_path), "lookup", "ABC123"])

    assert code == 0
    body = json.loads(capsys.readouterr().out)
    assert body["trackingId"] == "ABC123"
    assert body["_meta"]["provider"] == "17track"


def test_lookup_without_any_keys_returns_2(tmp_path):
    cwd = os.getcwd()
    os.chdir(tmp_path)
    try:
        code = run_cli(["--no-console", "--env-file", _empty_env_file(tmp_path), "lookup", "ABC123"])
    finally:
        os.chdir(cwd)
    assert code == 2


def test_lookup_blank_tracking_returns_2(tmp_path, monkeypatch):
    monkeypatch.setenv("TRACK17_API_KEY", "k")
    code = run_cli(["--no-console", "--env-file", _empty_env_file(tmp_path), "lookup", "   "])
    assert code == 2


def test_lookup_provider_failure_returns_1(tmp_path, monkeypatch):
    monkeypatch.setenv("TRACK17_API_KEY", "k")

    def failing_lookup(self, request):
        raise ProviderUnavailableError("No tracking provider available", status=502)

    monkeypatch.setattr(TrackingService, "lookup", failing_lookup)
    code = run_cli(["--no-console", "--env-file", _empty_env_file(tmp_path), "lookup", "ABC123"])
    assert code == 1


def test_bad_timeout_env_returns_2(tmp_path, monkeypatch):
    monkeypatch.setenv("HTTP_TIMEOUT", "never")
    code = run_cli(["--no-console", "--env-file", _empty_env_file(tmp_path), "lookup", "ABC123"])
    assert code == 2


def test_zero_timeout_env_returns_2(tmp_path, monkeypatch):
    monkeypatch.setenv("HTTP_TIMEOUT", "0")
    code = run_cli(["--no-console", "--env-file", _empty_env_file(tmp_path), "lookup", "ABC123"])
    assert code == 2
