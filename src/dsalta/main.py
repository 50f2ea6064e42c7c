from __future__ import annotations
import argparse, json, logging, sys
from typing import List, Optional

from dotenv import load_dotenv

from dsalta.infrastructure.http.exceptions import ConfigurationError
from dsalta.services.hashing_service import DsaltaClient


def _parse_metadata(ap: argparse.ArgumentParser, raw: Optional[str]):
    if raw is None:
        return None
    try:
        metadata = json.loads(raw)
    except json.JSONDecodeError as e:
        ap.error(f"--metadata is not valid JSON: {e}")
    if not isinstance(metadata, dict):
        ap.error("--metadata must be a JSON object")
    return metadata


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Hash a file with the Dsalta API.")
    ap.add_argument("file", help="Path of the file to hash")
    ap.add_argument("--metadata", default=None, help='JSON object, e.g. \'{"author": "Jane"}\'')
    ap.add_argument("--api-key", default=None, help="Defaults to DSALTA_API_KEY")
    ap.add_argument("--base-url", default=None, help="Defaults to DSALTA_BASE_URL")
    ap.add_argument("--timeout-ms", type=int, default=None)
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv()

    metadata = _parse_metadata(ap, args.metadata)

    try:
        client = DsaltaClient(
            api_key=args.api_key, base_url=args.base_url, timeout_ms=args.timeout_ms
        )
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2

    res = client.hash_file(args.file, metadata)
    print(json.dumps(res.to_dict(), ensure_ascii=False, indent=2))
    return 0 if res.success else 1


if __name__ == "__main__":
    sys.exit(main())
