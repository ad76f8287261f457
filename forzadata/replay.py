import logging
import struct
import socket
import threading
import time

logger = logging.getLogger("forzadata")

# per record: seconds since capture start, payload length; payload follows
RECORD = struct.Struct("<dI")


class CaptureWriter:
    def __init__(self, path: str):
        self.path = path
        self._file = open(path, "wb")
        self._t0 = None
        self.count = 0

    def write(self, data: bytes, ts: float = None):
        now = time.time() if ts is None else ts
        if self._t0 is None:
            self._t0 = now
        self._file.write(RECORD.pack(now - self._t0, len(data)))
        self._file.write(data)
        self.count += 1

    def flush(self):
        self._file.flush()

    def close(self):
        if not self._file.closed:
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def read_capture(path: str) -> list:
    """Load a capture file as a list of (offset_seconds, datagram)."""
    packets = []
    with open(path, "rb") as f:
        while True:
            head = f.read(RECORD.size)
            if not head:
                break
            if len(head) < RECORD.size:
                raise ValueError(f"Truncated record header in {path} after {len(packets)} packets")
            ts, length = RECORD.unpack(head)
            data = f.read(length)
            if len(data) < length:
                raise ValueError(f"Truncated payload in {path} after {len(packets)} packets")
            packets.append((ts, data))
    return packets


class ReplayWorker(threading.Thread):
    def __init__(self, capture_path, host="127.0.0.1", port=9999, speed=1.0, loop=False):
        super().__init__(daemon=True)
        self.capture_path = capture_path
        self.target = (host, port)
        self.speed = max(0.01, float(speed))
        self.loop = bool(loop)
        self.sent = 0
        self._stop_event = threading.Event()

    def stop(self): self._stop_event.set()

    def run(self):
        packets = read_capture(self.capture_path)
        logger.info("Loaded %d packets from %s", len(packets), self.capture_path)
        if not packets:
            return
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            while not self._stop_event.is_set():
                start_wall = time.time()
                for ts, data in packets:
                    if self._stop_event.is_set():
                        break
                    delay = start_wall + ts / self.speed - time.time()
                    if delay > 0:
                        if self._stop_event.wait(delay):
                            break
                    sock.sendto(data, self.target)
                    self.sent += 1
                if not self.loop:
                    break
        finally:
            sock.close()
