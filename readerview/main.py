import argparse
import json
import sys
from datetime import datetime
from typing import List, Optional

from .article_pipeline import ArticlePipeline, render_content
from .config import Settings, configure_logging
from .errors import ReaderError
from .http_client import Fetcher


def _read(args: argparse.Namespace, settings: Settings) -> int:
    def log_fn(msg: str) -> None:
        ts = datetime.now().strftime("%H:%M:%S")
        print(f"[{ts}] {msg}", file=sys.stderr)

    pipeline = ArticlePipeline(fetcher=Fetcher(settings, log_fn=log_fn), log_fn=log_fn)
    try:
        extracted = pipeline.extract(args.url)
    except ReaderError as exc:
        log_fn(f"Error: {exc}")
        return 1
    html, chapters = render_content(extracted.content)

    if args.json:
        print(
            json.dumps(
                {
                    "url": args.url,
                    "title": extracted.title,
                    "content": html,
                    "chapters": [c.to_dict() for c in chapters],
                },
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        print(extracted.title)
        for chapter in chapters:
            print(f"  #{chapter.id}  {chapter.title}")
        print()
        print(html)
    return 0


def _serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_level=settings.log_level.lower())
    return 0


def cli_main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point.

    Examples:
      readerview serve --port 8000
      readerview read --url https://example.org/story --json
    """
    parser = argparse.ArgumentParser(description="Distraction-free article reader")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    read = sub.add_parser("read", help="Fetch one URL and print the sanitized reading view")
    read.add_argument("--url", required=True, help="Article URL")
    read.add_argument("--json", action="store_true", help="Print a JSON document instead of HTML")

    args = parser.parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    if args.command == "serve":
        return _serve(args, settings)
    return _read(args, settings)


def main() -> None:
    sys.exit(cli_main())
