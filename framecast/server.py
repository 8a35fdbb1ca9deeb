"""Receiver side: collect datagrams into an image and save it after inactivity."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
import time
from contextlib import suppress
from pathlib import Path

from .protocol import PACKET_SIZE, PORT, SHUTDOWN_TIMEOUT
from .reception import ReceptionState

log = logging.getLogger(__name__)

_RECEIVE_BUFFER = 256 * 1024 * 1024
_POLL_INTERVAL = 1.0


def setup_server_socket(host: str = "", port: int = PORT) -> socket.socket:
    """Create an IPv4 UDP socket bound to ``host``:``port`` with a large receive buffer."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    with suppress(OSError):
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, _RECEIVE_BUFFER)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    return sock


def run_server_loop(
    sock: socket.socket,
    state: ReceptionState,
    timeout: float = SHUTDOWN_TIMEOUT,
) -> Path | None:
    """Receive datagrams until an image has been idle for ``timeout`` seconds.

    The image is then saved and its path returned. A receive error other
    than a timeout ends the loop without saving, returning None.
    """
    sock.settimeout(min(_POLL_INTERVAL, timeout) if timeout > 0 else _POLL_INTERVAL)
    while True:
        data: bytes | None
        try:
            data = sock.recv(PACKET_SIZE)
        except socket.timeout:
            data = None
        except OSError as exc:
            log.error("receive failed: %s", exc)
            return None

        if state.active and time.time() - state.last_activity >= timeout:
            log.info("Inactivity detected. Saving and shutting down.")
            return state.save_image()

        if data:
            state.process_packet(data)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="framecast-server",
        description="Receive an image over UDP and save it as PPM.",
    )
    parser.add_argument("--host", default="", help="address to bind (default: all)")
    parser.add_argument("--port", type=int, default=PORT, help="UDP port to listen on")
    parser.add_argument(
        "--timeout",
        type=float,
        default=SHUTDOWN_TIMEOUT,
        help="seconds of inactivity before saving and stopping",
    )
    parser.add_argument(
        "--output-dir", type=Path, default=Path("."), help="where images are written"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the receiver until an image is complete and idle; return the exit status."""
    args = _parse_args(argv)
    try:
        sock = setup_server_socket(args.host, args.port)
    except OSError as exc:
        print(f"cannot set up server socket: {exc}", file=sys.stderr)
        return 1

    state = ReceptionState(output_dir=args.output_dir)
    print(
        f"UDP server started on port {args.port}. "
        f"Automatic stop after {args.timeout:g} s of inactivity."
    )
    print("Waiting for packets...")
    with sock:
        try:
            saved = run_server_loop(sock, state, args.timeout)
        except KeyboardInterrupt:
            saved = None
        if saved is not None:
            print(f"Image {state.current_image_id} saved: {saved} "
                  f"({state.progress:.1f}% complete)")
        print("Stopping server...")
        state.reset()
    return 0


if __name__ == "__main__":
    sys.exit(main())