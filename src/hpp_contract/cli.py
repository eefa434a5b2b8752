"""Command-line utilities for hpp_contract."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .codec import response_from_json
from .errors import HppError
from .settings import get_settings
from .signing import verify_response
from .transcoding import Direction, transcode


def _read_stdin() -> str | None:
    """Read the JSON payload from stdin if available."""
    try:
        if sys.stdin and not sys.stdin.isatty():
            return sys.stdin.read()
    except IOError as e:
        print(f"Error reading stdin: {e}", file=sys.stderr)
    return None


def _load_payload(path: str | None, stdin_payload: str | None) -> str:
    """Return the raw JSON text from a file or stdin."""
    if path:
        return Path(path).read_text(encoding="utf-8")
    if stdin_payload:
        return stdin_payload
    raise ValueError("No input provided. Use --input or pipe JSON via stdin.")


def main(argv: list[str] | None = None) -> int:
    """Verify the signature of an HPP response."""
    parser = argparse.ArgumentParser(
        description="Verify the signature of an HPP response JSON payload."
    )
    parser.add_argument(
        "--input",
        "-i",
        help="Path to the response JSON file. If omitted, reads from stdin.",
    )
    parser.add_argument(
        "--secret",
        "-s",
        help="Shared secret. If omitted, HPP_SHARED_SECRET is used.",
    )
    parser.add_argument(
        "--charset",
        "-c",
        help="Charset used to decode the payload. Defaults to HPP_CHARSET.",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Treat the payload as already decoded (no base64 transcoding).",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Quiet mode: suppress output, just return exit code.",
    )

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - controlled via tests
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 1

    try:
        settings = get_settings()
        secret = args.secret if args.secret is not None else settings.secret_value
        if secret is None:
            raise ValueError("Missing --secret and HPP_SHARED_SECRET is not set.")
        charset = args.charset or settings.charset

        stdin_payload = None if args.input else _read_stdin()
        response = response_from_json(_load_payload(args.input, stdin_payload))
        if not args.plain:
            response = transcode(response, Direction.FROM_TRANSPORT, charset)

        is_valid = verify_response(
            response, secret, allow_empty_secret=settings.allow_empty_secret
        )

        if not args.quiet:
            print(
                json.dumps(
                    {
                        "valid": bool(is_valid),
                        "order_id": response.order_id,
                        "result": response.result if is_valid else None,
                    },
                    separators=(",", ":"),
                )
            )

        return 0 if is_valid else 1

    except (HppError, ValueError, OSError) as exc:
        if not args.quiet:
            print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
