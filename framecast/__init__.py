"""Screen image transfer over UDP: PNG to BGRx conversion, packetisation, reassembly and PPM output."""

__version__ = "0.1.0"