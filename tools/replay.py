#!/usr/bin/env python3
import argparse, logging

from forzadata.replay import ReplayWorker


def main():
    ap = argparse.ArgumentParser(description="Replay a capture made by tools/record.py over UDP")
    ap.add_argument("capture")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=9999)
    ap.add_argument("--speed", type=float, default=1.0)
    ap.add_argument("--loop", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
    w = ReplayWorker(args.capture, host=args.host, port=args.port, speed=args.speed, loop=args.loop)
    w.start()
    try:
        while w.is_alive():
            w.join(0.5)
    except KeyboardInterrupt:
        w.stop(); w.join()
    print(f"Sent {w.sent} packets to {args.host}:{args.port}")

if __name__ == "__main__":
    main()
