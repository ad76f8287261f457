#!/usr/bin/env python3
import argparse, os, socket, sys, time

from forzadata.core.decoders import decode
from forzadata.core.errors import DecodeError, SchemaError
from forzadata.core.schema import BUNDLED, bundled_schema, load_schema
from forzadata.replay import CaptureWriter


def main():
    ap = argparse.ArgumentParser(description="Record raw Forza Data Out datagrams for later replay")
    ap.add_argument("--ip", default="0.0.0.0")
    ap.add_argument("--port", type=int, default=9999)
    ap.add_argument("--out", default="data/session.fdcap")
    ap.add_argument("--duration", type=float, default=0, help="seconds to record, 0 = until Ctrl+C")
    ap.add_argument("--format", default="fm7", help="fm7, fh4 or a .dat path; used to show live RPM")
    args = ap.parse_args()

    try:
        path = bundled_schema(args.format) if args.format.lower() in BUNDLED else args.format
        fields = load_schema(path)
    except SchemaError as e:
        print(e, file=sys.stderr)
        sys.exit(1)

    os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind((args.ip, args.port))
    sock.settimeout(1.0)

    print(f"Recording… {args.ip}:{args.port} -> {args.out}")
    start = time.time()
    with CaptureWriter(args.out) as cap:
        try:
            while not args.duration or time.time() - start < args.duration:
                try:
                    data, _ = sock.recvfrom(1500)
                except socket.timeout:
                    continue
                cap.write(data)
                if cap.count % 60 == 0:
                    cap.flush()
                    try:
                        rpm = decode(fields, data).f32.get("CurrentEngineRpm", 0.0)
                    except DecodeError:
                        rpm = None
                    print(f"  {cap.count} packets ({int(time.time() - start)}s) rpm={rpm}")
        except KeyboardInterrupt:
            pass
        finally:
            sock.close()
    print(f"Saved {cap.count} packets to {args.out}")

if __name__ == "__main__":
    main()
