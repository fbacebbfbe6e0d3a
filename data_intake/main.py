import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from . import config
from .core import DataIngestor
from .exceptions import DataIntakeError
from .models import InputSpec


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to stderr and, optionally, a log file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("PIL").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description="Data Intake: stage data URIs, base64 payloads and local files")

    p.add_argument("inputs", nargs="+", help="Data URI, base64 payload (with --base64) or file path")

    p.add_argument("--temp-dir", type=Path, default=None, help="Staging directory (default: system temp dir)")
    p.add_argument("--algo", default=config.DEFAULT_HASH_ALGORITHM, help="Hash algorithm for the fingerprint")
    p.add_argument("--base64", action="store_true", help="Treat inputs without a data: prefix as bare base64")
    p.add_argument("--name", default=None, help="Display name (only with a single input)")
    p.add_argument("--delete-original", action="store_true", help="Delete source files once they are staged")
    p.add_argument("--auto-delete", action="store_true",
                   help="Remove staged files when the command exits (default: keep them)")
    p.add_argument("--output", choices=("json", "uri"), default="json", help="What to print per input")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")

    args = p.parse_args(argv)
    if args.name and len(args.inputs) > 1:
        p.error("--name can only be used with a single input")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    ingestor = DataIngestor()
    failures = 0

    for raw in tqdm(args.inputs, desc="Ingesting", disable=len(args.inputs) < 2, file=sys.stderr):
        try:
            spec = InputSpec(
                raw=raw,
                display_name=args.name,
                hash_algorithm=args.algo,
                temp_dir=args.temp_dir,
                assume_base64=args.base64,
                delete_original=args.delete_original,
                auto_delete=args.auto_delete,
            )
            with ingestor.ingest(spec) as descriptor:
                if args.output == "uri":
                    print(descriptor.to_data_uri())
                else:
                    print(json.dumps(descriptor.to_dict()))
        except DataIntakeError as e:
            # A bad input should not stop the rest of the batch
            logging.error(f"[{e.kind.name}] {e}")
            failures += 1
        except KeyboardInterrupt:
            logging.warning("Operation cancelled by user.")
            return 1

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
