# core/logger.py
import csv
import logging
import os

logger = logging.getLogger("forzadata")


def _prepare(path: str):
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)


class CSVLogger:
    """
    Append one row per frame, columns in schema order.

    The file is truncated and the header written on open; reserved (hzn)
    fields get a header slot and an empty value in every row.
    """

    def __init__(self, path: str, fields):
        self.path = path
        self.fields = fields
        _prepare(path)
        with open(path, "w", newline="") as f:
            csv.writer(f).writerow(csv_header(fields))
        self._file = open(path, "a", newline="")
        self._writer = csv.writer(self._file)
        logger.info("Logging data to %s", path)

    def emit(self, frame):
        self._writer.writerow([frame.text_value(fd) for fd in self.fields])
        self._file.flush()

    def close(self):
        if self._file and not self._file.closed:
            self._file.close()


class JSONLogger:
    def __init__(self, path: str):
        self.path = path
        _prepare(path)
        self._file = open(path, "w")
        logger.info("Logging data to %s", path)

    def emit(self, frame):
        self._file.write(frame.to_snapshot() + "\n")
        self._file.flush()

    def close(self):
        if self._file and not self._file.closed:
            self._file.close()


def csv_header(fields) -> list:
    return [fd.name for fd in fields]
