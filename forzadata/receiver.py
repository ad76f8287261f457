import logging
import socket

from .core.decoders import decode
from .core.errors import DecodeError

logger = logging.getLogger("forzadata")

BUFFER_SIZE = 1500


class TelemetryReceiver:
    """
    Reads one datagram at a time, decodes it and hands the frame to every sink
    before reading the next. Idle (zero RPM) frames and datagrams shorter than
    the schema never reach the sinks.
    """

    def __init__(self, fields, sinks=None, bind_ip="0.0.0.0", port=9999):
        self.fields = fields
        self.sinks = list(sinks or [])
        self.bind_ip = bind_ip
        self.port = port
        self.sock = None
        self.frames = 0
        self.skipped = 0

    def bind(self):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind((self.bind_ip, self.port))
        self.port = self.sock.getsockname()[1]
        return self

    def handle_datagram(self, data: bytes, addr=None):
        try:
            frame = decode(self.fields, data)
        except DecodeError as e:
            self.skipped += 1
            logger.warning("Skipping datagram from %s: %s", addr, e)
            return None
        if frame.is_idle():
            return None
        for sink in self.sinks:
            sink.emit(frame)
        self.frames += 1
        return frame

    def serve_forever(self):
        if self.sock is None:
            self.bind()
        while True:
            data, addr = self.sock.recvfrom(BUFFER_SIZE)
            logger.debug("UDP client connected: %s", addr)
            self.handle_datagram(data, addr)

    def close(self):
        if self.sock is not None:
            self.sock.close()
            self.sock = None
        for sink in self.sinks:
            sink.close()
