import argparse
import logging
import os
import sys
from typing import List, Optional

import requests

from pdfdrop.client.form import MAX_FILE_SIZE, UPLOAD_TIMEOUT, SelectedFile, UploadForm
from pdfdrop.client.preview import PREVIEW_METHODS
from pdfdrop.services.pdf_service import format_file_size

DEFAULT_URL = os.getenv("PDFDROP_URL", "http://127.0.0.1:5000/api/upload")


def cmd_upload(args) -> int:
    if not os.path.exists(args.pdf):
        raise SystemExit(f"File not found: {args.pdf}")

    max_size = args.max_size if args.max_size > 0 else None
    with UploadForm(args.url, max_file_size=max_size, timeout=args.timeout) as form:
        candidate = SelectedFile.from_path(args.pdf, content_type=args.content_type)
        if not form.select_file(candidate):
            print(f"Error: {form.error}", file=sys.stderr)
            return 1

        form.preview.switch(args.preview)
        pages = form.preview.page_count
        print(f"Selected {candidate.name} ({format_file_size(candidate.size)}"
              f"{', %d pages' % pages if pages is not None else ''})")
        print(f"Preview: {form.preview.render()}")
        print(f"Download: {form.preview.download_link()}")

        result = form.upload()
        if result is None:
            print(f"Error: {form.error}", file=sys.stderr)
            return 1

        print(f"{result.message}: {result.original_name} ({format_file_size(result.size)})")
        if result.processor_status:
            print(f"Processor: {result.processor_status}")
        returned = form.result_bytes()
        if returned is None:
            print(f"Stored at: {result.path}")
        elif args.out:
            with open(args.out, "wb") as f:
                f.write(returned)
            print(f"Saved response to {args.out}")
    return 0


def cmd_ping(args) -> int:
    try:
        r = requests.get(args.url, timeout=args.timeout)
        r.raise_for_status()
        payload = r.json()
    except (requests.RequestException, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"{payload.get('message')} ({payload.get('timestamp')})")
    return 0


def cmd_serve(args) -> int:
    from pdfdrop import create_app

    app = create_app(args.config)
    app.run(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="pdfdrop", description="PDF upload page and client")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="command", required=True)

    up = sub.add_parser("upload", help="Validate and upload a PDF")
    up.add_argument("pdf", help="Path to the PDF")
    up.add_argument("--url", default=DEFAULT_URL)
    up.add_argument("--timeout", type=float, default=UPLOAD_TIMEOUT)
    up.add_argument("--max-size", type=int, default=MAX_FILE_SIZE, help="Size ceiling in bytes, 0 disables it")
    up.add_argument("--content-type", default=None, help="Declared type, guessed from the name by default")
    up.add_argument("--preview", choices=PREVIEW_METHODS, default="embed")
    up.add_argument("--out", default="", help="Where to save the PDF returned in proxy mode")
    up.set_defaults(func=cmd_upload)

    ping = sub.add_parser("ping", help="Call the liveness endpoint")
    ping.add_argument("--url", default=DEFAULT_URL)
    ping.add_argument("--timeout", type=float, default=10)
    ping.set_defaults(func=cmd_ping)

    serve = sub.add_parser("serve", help="Run the development server")
    serve.add_argument("--config", default=os.getenv("FLASK_ENV", "development"),
                       choices=("development", "production", "testing", "default"))
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=int(os.getenv("PORT", 5000)))
    serve.set_defaults(func=cmd_serve)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s - %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
