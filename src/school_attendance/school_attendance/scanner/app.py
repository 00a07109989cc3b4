"""Scanner device entry point.

Reads QR payloads line by line (USB scanners type them like a keyboard) and
records each one online or in the offline buffer.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from typing import Iterable, Optional, TextIO

import requests
from dotenv import load_dotenv

from config import get_settings_module

from ..common.logging_setup import configure_logging
from ..core.enums import AttendanceType
from ..sync.reconciler import SyncReconciler
from .connectivity import ConnectivityProbe
from .offline_buffer import OfflineBuffer
from .remote_store import RemoteAttendanceStore
from .scan_service import ScanService
from .session import make_device_id

logger = logging.getLogger(__name__)


def build_scanner(settings_module: Optional[str] = None, *, http: Optional[requests.Session] = None) -> ScanService:
    load_dotenv(override=False)
    settings = importlib.import_module(settings_module or get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    http = http or requests.Session()
    base_url = settings.SERVER_BASE_URL
    device_id = getattr(settings, "DEVICE_ID", "") or make_device_id()

    probe = ConnectivityProbe(base_url, session=http, timeout=settings.HEALTH_TIMEOUT_SECONDS)
    remote = RemoteAttendanceStore(base_url, session=http, timeout=settings.SYNC_TIMEOUT_SECONDS)
    buffer = OfflineBuffer(settings.OFFLINE_DB_PATH)
    reconciler = SyncReconciler(buffer, remote, device_id=device_id)

    service = ScanService(remote, buffer, probe, reconciler, device_id=device_id)
    probe.add_listener(service.on_connectivity_changed)
    return service


def run_scan_loop(service: ScanService, lines: Iterable[str], attendance_type: AttendanceType, out: TextIO) -> int:
    """Process scans until input ends; returns how many were accepted."""
    accepted = 0
    for line in lines:
        raw = line.strip()
        if not raw:
            continue
        if raw.lower() in {"sync", ":sync"}:
            summary = service.sync_offline_data()
            print(summary.message, file=out)
            continue

        outcome = service.scan(raw, attendance_type)
        print(f"[{outcome.disposition.value}] {outcome.message}", file=out)
        if outcome.accepted:
            accepted += 1
    return accepted


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Scan student QR codes for daily attendance.")
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument(
        "--type",
        choices=[t.value for t in AttendanceType],
        default=AttendanceType.TIME_IN.value,
        help="record time in or time out",
    )
    parser.add_argument("--sync-only", action="store_true", help="sync buffered scans and exit")
    args = parser.parse_args(argv)

    service = build_scanner()
    scan_session = service.login(args.username, args.password)
    if scan_session is None:
        print("Login failed (or server unreachable)", file=sys.stderr)
        return 1
    try:
        if args.sync_only:
            summary = service.sync_offline_data()
            print(summary.message)
            return 0 if summary.success else 2

        print(f"Ready. Scanning {args.type} for {scan_session.actor.full_name} (Ctrl+D to stop).")
        run_scan_loop(service, sys.stdin, AttendanceType(args.type), sys.stdout)
    finally:
        service.end_session()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
