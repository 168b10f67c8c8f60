from __future__ import annotations

import argparse
import json
import logging
from typing import Callable, List, TypeVar

from rich.console import Console
from rich.logging import RichHandler

from .bench import run_benchmark
from .constants import DEFAULT_RATES, DEFAULT_ROUNDS, DEFAULT_SIZES
from .display import ConsoleDisplay, NullDisplay, render_table
from .errors import ConfigurationError, EchoProbeError
from .net import Impairment, UdpEndpoint, parse_address
from .responder import EchoResponder
from .stats import StatsAggregator
from .sweep import build_sweep, run_sweep, summarize

log = logging.getLogger("echoprobe")

T = TypeVar("T")


def _csv_of(conv: Callable[[str], T]) -> Callable[[str], List[T]]:
    def parse(text: str) -> List[T]:
        items = [conv(x) for x in text.split(",") if x.strip()]
        if not items:
            raise argparse.ArgumentTypeError("expected a comma separated list")
        return items

    parse.__name__ = f"{conv.__name__} list"
    return parse


def _address(text: str):
    try:
        return parse_address(text)
    except ConfigurationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def cmd_probe(args: argparse.Namespace, console: Console) -> int:
    configs = build_sweep(args.rates, args.sizes, args.rounds)
    aggregator = StatsAggregator()
    host, port = args.bind

    with UdpEndpoint.bound(host, port) as udp:
        udp.check_reachable(args.target)
        if args.json or args.no_live:
            snapshot = run_sweep(udp, args.target, configs, aggregator, NullDisplay())
        else:
            with ConsoleDisplay(configs, console=console) as display:
                snapshot = run_sweep(udp, args.target, configs, aggregator, display)

    if args.json:
        print(json.dumps(summarize(configs, snapshot), indent=2))
    elif args.no_live:
        console.print(render_table(configs, snapshot))
    return 0


def cmd_echo(args: argparse.Namespace, console: Console) -> int:
    impair = Impairment(args.loss_rate, args.delay_ms)
    responder = EchoResponder(UdpEndpoint.bound(args.listen_host, args.listen_port, impairment=impair))
    try:
        responder.run()
    except KeyboardInterrupt:
        log.info("interrupted; echoed=%d", responder.echoed)
    finally:
        responder.udp.close()
    return 0


def cmd_bench(args: argparse.Namespace, console: Console) -> int:
    if args.json:
        r = run_benchmark(
            rates=args.rates,
            sizes=args.sizes,
            rounds=args.rounds,
            loss_rate=args.loss_rate,
            delay_ms=args.delay_ms,
        )
        print(json.dumps({"role": "bench", **r.to_dict()}, indent=2))
        return 0

    configs = build_sweep(args.rates, args.sizes, args.rounds)
    with ConsoleDisplay(configs, console=console) as display:
        r = run_benchmark(
            rates=args.rates,
            sizes=args.sizes,
            rounds=args.rounds,
            loss_rate=args.loss_rate,
            delay_ms=args.delay_ms,
            display=display,
        )
    console.print(f"done in {r.duration_s:.2f}s; responder echoed {r.echoed} datagrams")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="echoprobe", description="UDP round-trip delivery probe.")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_sweep(x: argparse.ArgumentParser) -> None:
        x.add_argument("--rates", type=_csv_of(float), default=list(DEFAULT_RATES), help="send rates in Hz")
        x.add_argument("--sizes", type=_csv_of(int), default=list(DEFAULT_SIZES), help="payload sizes in bytes")
        x.add_argument("--rounds", type=int, default=DEFAULT_ROUNDS)
        x.add_argument("--json", action="store_true")

    probe = sub.add_parser("probe", help="sweep rates and sizes against a remote echo service")
    add_sweep(probe)
    probe.add_argument("--bind", type=_address, required=True, help="local HOST:PORT")
    probe.add_argument("--target", type=_address, required=True, help="remote HOST:PORT")
    probe.add_argument("--no-live", action="store_true", help="print only the final table")
    probe.set_defaults(func=cmd_probe)

    echo = sub.add_parser("echo", help="echo every datagram back to its sender")
    echo.add_argument("--listen-host", default="0.0.0.0")
    echo.add_argument("--listen-port", type=int, required=True)
    echo.add_argument("--loss-rate", type=float, default=0.0, help="simulate packet loss")
    echo.add_argument("--delay-ms", type=int, default=0, help="simulate per-direction delay")
    echo.set_defaults(func=cmd_echo)

    bench = sub.add_parser("bench", help="sweep against an in-process responder on loopback")
    add_sweep(bench)
    bench.add_argument("--loss-rate", type=float, default=0.0)
    bench.add_argument("--delay-ms", type=int, default=0)
    bench.set_defaults(func=cmd_bench)

    return p


def configure_logging(level: str, console: Console) -> RichHandler:
    handler = RichHandler(console=console, rich_tracebacks=True)
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
    )
    return handler


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    # display and log records share stderr; stdout carries only --json output
    console = Console(stderr=True)
    configure_logging(args.log_level, console)

    try:
        return int(args.func(args, console))
    except ConfigurationError as exc:
        log.error("configuration error: %s", exc)
        return 2
    except (EchoProbeError, OSError) as exc:
        log.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
