#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import signal
import threading
from datetime import datetime
from typing import Optional

from app.clients.unread_poller import UNREAD_ENDPOINTS, UnreadCountError, UnreadCountPoller, http_fetcher
from app.core.config import settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Poll an unread-count endpoint and print the count.')
    parser.add_argument('--base-url', default='http://127.0.0.1:8000')
    parser.add_argument('--token', default=os.getenv('SOLOPACK_TOKEN'), help='Access token (or SOLOPACK_TOKEN)')
    parser.add_argument('--endpoint', choices=sorted(UNREAD_ENDPOINTS), default='notifications')
    parser.add_argument('--interval', type=float, default=settings.UNREAD_POLL_INTERVAL_SECONDS)
    parser.add_argument('--once', action='store_true', help='Fetch a single count and exit')
    return parser


def format_count(endpoint: str, count: int, now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime('%H:%M:%S')
    return f"[{stamp}] {endpoint}: {count} unread"


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.token:
        print('missing --token')
        return 2

    fetch = http_fetcher(args.base_url, UNREAD_ENDPOINTS[args.endpoint], args.token)
    if args.once:
        try:
            print(format_count(args.endpoint, fetch()))
        except UnreadCountError as exc:
            print(f"failed: {exc}")
            return 1
        return 0

    done = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: done.set())
    poller = UnreadCountPoller(
        fetch,
        interval=args.interval,
        on_update=lambda count: print(format_count(args.endpoint, count), flush=True),
        on_error=lambda exc: print(f"poll failed: {exc}", flush=True),
    )
    with poller:
        done.wait()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
