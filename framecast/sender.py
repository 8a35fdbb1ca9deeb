"""Client side: split a raw image into datagrams and send them to the receiver."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
import time
from collections.abc import Iterator
from contextlib import suppress
from pathlib import Path

from .converter import ConversionError, RawImage, convert_png_to_raw
from .protocol import PAYLOAD_SIZE, SERVER_ADDR, SERVER_PORT, PacketHeader

log = logging.getLogger(__name__)

_SEND_BUFFER = 32 * 1024 * 1024


def setup_socket(
    address: str = SERVER_ADDR, port: int = SERVER_PORT
) -> tuple[socket.socket, tuple[str, int]]:
    """Create an IPv4 UDP socket with a large send buffer and the destination address.

    Raises ValueError if ``address`` is not a dotted IPv4 address.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        socket.inet_pton(socket.AF_INET, address)
    except OSError as exc:
        sock.close()
        raise ValueError(f"invalid IPv4 address: {address!r}") from exc
    with suppress(OSError):
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, _SEND_BUFFER)
    return sock, (address, port)


def build_packets(image: RawImage, image_id: int = 0) -> Iterator[bytes]:
    """Yield the datagrams carrying ``image``, each a header followed by a payload slice."""
    data = memoryview(image.data)
    total = -(-len(data) // PAYLOAD_SIZE)
    for seq in range(total):
        header = PacketHeader(
            image_id=image_id,
            seq=seq,
            total_packets=total,
            width=image.width,
            height=image.height,
        )
        chunk = data[seq * PAYLOAD_SIZE:(seq + 1) * PAYLOAD_SIZE]
        yield header.pack() + bytes(chunk)


def send_image_data(
    sock: socket.socket, image: RawImage, dest: tuple[str, int]
) -> int:
    """Send every datagram of ``image`` to ``dest``; return how many were sent.

    Datagrams that the system refuses are logged and skipped.
    """
    sent = 0
    for packet in build_packets(image):
        try:
            sock.sendto(packet, dest)
        except OSError as exc:
            log.warning("datagram not sent: %s", exc)
            continue
        sent += 1
    return sent


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="framecast-send",
        description="Send a PNG screenshot as raw BGRx pixels over UDP.",
    )
    parser.add_argument("image", type=Path, help="PNG file to send")
    parser.add_argument("--host", default=SERVER_ADDR, help="receiver IPv4 address")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help="receiver port")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Read a PNG, convert it to raw pixels and send it; return the exit status."""
    args = _parse_args(argv)

    try:
        png_data = args.image.read_bytes()
    except OSError as exc:
        print(f"cannot read {args.image}: {exc}", file=sys.stderr)
        return 1

    try:
        image = convert_png_to_raw(png_data)
    except ConversionError as exc:
        print(f"error while loading PNG data: {exc}", file=sys.stderr)
        return 1

    try:
        sock, dest = setup_socket(args.host, args.port)
    except (OSError, ValueError) as exc:
        print(f"cannot set up socket: {exc}", file=sys.stderr)
        return 1

    with sock:
        start = time.perf_counter()
        send_image_data(sock, image, dest)
        elapsed = time.perf_counter() - start

    megabytes = image.length / (1024.0 * 1024.0)
    rate = megabytes / elapsed if elapsed > 0 else float("inf")
    print(f"Sent in {elapsed:.2f} s, throughput {rate:.2f} MB/s")
    return 0


if __name__ == "__main__":
    sys.exit(main())