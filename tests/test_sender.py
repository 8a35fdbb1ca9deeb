import io
import socket

import pytest
from PIL import Image

from framecast.converter import RawImage
from framecast.protocol import HEADER_SIZE, PAYLOAD_SIZE, SERVER_PORT, PacketHeader
from framecast.reception import ReceptionState
from framecast.sender import build_packets, main, send_image_data, setup_socket


def _image(length, width=7, height=3):
    data = bytes(i % 251 for i in range(length))
    return RawImage(data=data, width=width, height=height)


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


def test_build_packets_splits_payload_and_reassembles():
    image = _image(2 * PAYLOAD_SIZE + 1)
    packets = list(build_packets(image))
    assert len(packets) == 3
    assert b"".join(p[HEADER_SIZE:] for p in packets) == image.data


def test_build_packets_headers_describe_image():
    image = _image(PAYLOAD_SIZE * 2, width=11, height=5)
    packets = list(build_packets(image, image_id=4))
    headers = [PacketHeader.unpack(p) for p in packets]
    assert [h.seq for h in headers] == list(range(len(packets)))
    assert all(h.total_packets == len(packets) for h in headers)
    assert all((h.image_id, h.width, h.height) == (4, 11, 5) for h in headers)


def test_build_packets_default_image_id_is_zero():
    first = next(build_packets(_image(10)))
    assert first[:4] == b"\x00\x00\x00\x00"


def test_build_packets_sizes_never_exceed_packet():
    image = _image(PAYLOAD_SIZE + 17)
    sizes = [len(p) for p in build_packets(image)]
    assert sizes == [HEADER_SIZE + PAYLOAD_SIZE, HEADER_SIZE + 17]


def test_build_packets_empty_image_yields_nothing():
    assert list(build_packets(RawImage(data=b"", width=0, height=0))) == []


def test_setup_socket_returns_destination():
    sock, dest = setup_socket("127.0.0.1", 9)
    with sock:
        assert dest == ("127.0.0.1", 9)
        assert sock.type == socket.SOCK_DGRAM


def test_setup_socket_default_port():
    sock, dest = setup_socket()
    with sock:
        assert dest[1] == SERVER_PORT


def test_setup_socket_rejects_bad_address():
    with pytest.raises(ValueError):
        setup_socket("not-an-address", 9)


def test_send_image_data_round_trip(receiver):
    image = _image(PAYLOAD_SIZE * 3 + 5, width=2, height=2)
    sock, dest = setup_socket("127.0.0.1", receiver.getsockname()[1])
    with sock:
        sent = send_image_data(sock, image, dest)
    expected = list(build_packets(image))
    assert sent == len(expected)
    state = ReceptionState()
    for _ in expected:
        state.process_packet(receiver.recv(2048), now=0.0)
    assert state.packets_received == len(expected)
    assert bytes(state.image_buffer[:image.length]) == image.data


def test_main_sends_png(tmp_path, receiver):
    path = tmp_path / "shot.png"
    buf = io.BytesIO()
    Image.new("RGB", (3, 2), (10, 20, 30)).save(buf, format="PNG")
    path.write_bytes(buf.getvalue())
    port = receiver.getsockname()[1]
    assert main([str(path), "--host", "127.0.0.1", "--port", str(port)]) == 0
    packet = receiver.recv(2048)
    header = PacketHeader.unpack(packet)
    assert (header.width, header.height) == (3, 2)
    assert packet[HEADER_SIZE:HEADER_SIZE + 4] == bytes([30, 20, 10, 0xFF])


def test_main_missing_file_fails(tmp_path):
    assert main([str(tmp_path / "missing.png")]) == 1


def test_main_invalid_png_fails(tmp_path):
    path = tmp_path / "bad.png"
    path.write_bytes(b"not a png")
    assert main([str(path), "--host", "127.0.0.1"]) == 1