# framecast

framecast sends one screen image from one machine to another over UDP. The
receiving machine rebuilds the image and saves it as a binary PPM file.

The sender reads a PNG file and converts it to raw BGRx pixels, 4 bytes per
pixel. The fourth byte is always 0xFF. It then cuts the pixels into datagrams
of at most 1000 bytes. Each datagram starts with a 20-byte header of five
unsigned 32-bit fields in network byte order:

1. image id
2. sequence number
3. total packet count
4. width
5. height

A payload of up to 980 bytes follows the header.

The receiver places each payload by its sequence number and ignores any
duplicate. It saves the image as `image_<id>.ppm` in either of two cases:

- a packet with a different image id arrives, after which it starts on the
  new image
- no packet has arrived for the inactivity timeout, after which the server
  stops

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command-line use

Start the receiver first:

```
framecast-server
```

Options:

- `--host`: address to bind. The default binds all addresses.
- `--port`: UDP port. The default is 8080.
- `--timeout`: seconds of inactivity before the server saves and stops. The
  default is 1.
- `--output-dir`: directory the images are written to. The default is the
  current directory.

At startup the server prints the port and the timeout it uses. Once an image
has received packets and the timeout then passes with no new packet, the
server saves the image and exits. It prints the saved path and the share of
expected packets that arrived. Ctrl-C also stops it, without saving.

Then send a PNG from the other machine:

```
framecast-send screenshot.png
```

Options:

- `--host`: receiver IPv4 address. The default is 192.168.1.241.
- `--port`: receiver port. The default is 8080.

The sender always uses image id 0. When it finishes, it prints how long the
transfer took and the throughput in MB/s. The sender exits with status 1 in
any of these cases:

- the file cannot be read
- the file is not a PNG it can decode
- the host is not a valid IPv4 address

## Library use

```python
from framecast.converter import convert_png_to_raw
from framecast.reception import ReceptionState
from framecast.sender import build_packets

with open("screenshot.png", "rb") as fh:
    image = convert_png_to_raw(fh.read())

state = ReceptionState()
for packet in build_packets(image, 0):
    state.process_packet(packet, now=0.0)

state.save_image(".")   # writes ./image_0.ppm and returns its path
```

### `framecast.protocol`

This module holds the shared settings, such as `PACKET_SIZE`, `HEADER_SIZE`,
`PAYLOAD_SIZE` and `PORT`. It also defines the `PacketHeader` dataclass:

- `PacketHeader.pack()` encodes the header. It raises `ValueError` if a field
  does not fit in 32 bits.
- `PacketHeader.unpack(data)` decodes the header from the start of `data`. It
  raises `ValueError` if `data` is shorter than 20 bytes.

### `framecast.converter`

`convert_png_to_raw(png_data)` returns a `RawImage`, which has the fields
`data`, `width`, `height` and `length`. Any PNG mode is first converted to
RGB. The function raises `ConversionError` when the data cannot be decoded as
PNG.

### `framecast.reception`

`ReceptionState` holds the image being received:

- `process_packet(data, now=None)` returns True when the packet added a new
  piece. Packets shorter than a header are ignored.
- `save_image(directory=None)` writes the PPM. It returns None when no image is
  active.
- `progress` gives the percentage of expected packets that have arrived.
- `reset()` drops the current image.

### `framecast.sender`

- `setup_socket(address, port)` returns a UDP socket and the destination
  address.
- `build_packets(image, image_id)` yields the datagrams for an image.
- `send_image_data(sock, image, dest)` sends every datagram and returns how
  many were sent.

### `framecast.server`

- `setup_server_socket(host, port)` returns a bound UDP socket.
- `run_server_loop(sock, state, timeout)` receives packets until the image has
  been idle for `timeout` seconds. It then saves the image and returns its
  path.

## What it does not do

- framecast does not take screenshots. The sender needs an existing PNG file.
- Delivery is not reliable. Lost datagrams are never sent again, and the parts
  of the image they carried stay black in the saved PPM.
- The server handles one transfer and then exits.
- The server reports the start of each new image only through the `logging`
  module, at INFO level. Configure logging to see those messages.