from __future__ import annotations

import io
import json

from rich.console import Console

from echoprobe.bench import run_benchmark
from echoprobe.cli import build_parser, configure_logging, main


def test_loopback_benchmark():
    r = run_benchmark(rates=[50.0], sizes=[8, 100], rounds=10)
    assert r.echoed == 20
    assert r.duration_s >= 20 / 50.0
    for row in r.to_dict()["runs"]:
        assert row["sent"] == 10
        assert row["missed"] == 0


def test_benchmark_with_total_loss():
    r = run_benchmark(rates=[50.0], sizes=[8], rounds=5, loss_rate=1.0)
    assert r.echoed == 0
    assert r.snapshot[0].missed == 5


def test_parser_lists():
    args = build_parser().parse_args(
        ["probe", "--bind", "127.0.0.1:0", "--target", "127.0.0.1:9000", "--rates", "4,8", "--sizes", "64"]
    )
    assert args.rates == [4.0, 8.0]
    assert args.sizes == [64]
    assert args.target == ("127.0.0.1", 9000)


def test_cli_bench_json(capsys):
    assert main(["bench", "--rates", "100", "--sizes", "8", "--rounds", "3", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["role"] == "bench"
    assert payload["runs"][0]["sent"] == 3


def test_cli_rejects_small_payload():
    assert main(["bench", "--sizes", "4", "--rounds", "1", "--json"]) == 2


def test_cli_probe_json_against_echo(echo_peer, capsys):
    host, port = echo_peer.udp.address
    rc = main(
        ["probe", "--bind", "127.0.0.1:0", "--target", f"{host}:{port}", "--rates", "100", "--sizes", "16", "--rounds", "4", "--json"]
    )
    assert rc == 0
    rows = json.loads(capsys.readouterr().out)
    assert rows[0]["sent"] == 4
    assert rows[0]["missed"] == 0


def test_logging_shares_display_console():
    console = Console(file=io.StringIO())
    handler = configure_logging("INFO", console)
    assert handler.console is console
