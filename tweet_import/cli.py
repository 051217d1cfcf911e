from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from .config import config_sha256, load_config
from .config_schema import AppConfig
from .dedupe import dedupe_posts
from .errors import ConfigError, ExportError, ImportFormatError, ImportInputError
from .export import export_posts_json, export_posts_jsonl, export_posts_workbook
from .importer import import_posts, read_import_file
from .insights import summarize_posts
from .run_log import RunLogger
from .sniff import detect_import_format


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tweet_import")

    subparsers = parser.add_subparsers(dest="command", required=True)

    detect = subparsers.add_parser(
        "detect",
        help="Print the detected format of an import file.",
    )
    detect.add_argument(
        "--input",
        required=True,
        help="Path to the export file, or - for stdin.",
    )
    detect.add_argument(
        "--config",
        help="Path to YAML config file.",
    )
    detect.set_defaults(_handler=_cmd_detect)

    parse = subparsers.add_parser(
        "parse",
        help="Normalize an export into canonical post records.",
    )
    parse.add_argument(
        "--input",
        required=True,
        help="Path to the export file, or - for stdin.",
    )
    parse.add_argument(
        "--out",
        required=True,
        help="Output file for the normalized posts.",
    )
    parse.add_argument(
        "--config",
        help="Path to YAML config file.",
    )
    parse.add_argument(
        "--format",
        choices=("json", "jsonl", "xlsx"),
        help="Output format (overrides output.format from the config).",
    )
    parse.add_argument(
        "--log",
        help="Path of a JSONL run log to write.",
    )
    parse.set_defaults(_handler=_cmd_parse)

    insights = subparsers.add_parser(
        "insights",
        help="Print aggregate statistics for an export as JSON.",
    )
    insights.add_argument(
        "--input",
        required=True,
        help="Path to the export file, or - for stdin.",
    )
    insights.add_argument(
        "--config",
        help="Path to YAML config file.",
    )
    insights.set_defaults(_handler=_cmd_insights)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _read_input(cfg: AppConfig, path: str) -> str:
    return read_import_file(
        path,
        encoding=cfg.input.encoding,
        max_bytes=cfg.input.max_bytes,
    )


def _cmd_detect(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    raw = _read_input(cfg, args.input)
    print(f"format={detect_import_format(raw)}")
    return 0


def _parse_with_log(args: argparse.Namespace, log: RunLogger | None) -> int:
    cfg = load_config(args.config)
    if log is not None:
        cfg_hash = config_sha256(cfg)
        log.set_run_id(cfg_hash[:16])
        log.info(
            "config_loaded",
            config_path=str(args.config) if args.config else None,
            config_sha256=cfg_hash,
        )

    raw = _read_input(cfg, args.input)
    result = import_posts(raw, config=cfg, logger=log, source=str(args.input))

    posts = list(result.posts)
    if cfg.output.dedupe:
        before = len(posts)
        posts = dedupe_posts(posts)
        if log is not None and len(posts) != before:
            log.info("duplicates_dropped", dropped=before - len(posts), kept=len(posts))

    out_format = args.format or cfg.output.format
    out_path = Path(args.out)
    if out_format == "jsonl":
        export_posts_jsonl(posts, out_path)
    elif out_format == "xlsx":
        stats = summarize_posts(
            posts,
            top_topics=cfg.insights.top_topics,
            top_authors=cfg.insights.top_authors,
        )
        export_posts_workbook(posts, out_path, insights=stats)
    else:
        export_posts_json(posts, out_path, indent=cfg.output.indent)

    if log is not None:
        log.info("export_completed", path=str(out_path), format=out_format, posts=len(posts))

    print(f"format={result.format}")
    print(f"posts={len(posts)}")
    print(f"out={out_path}")
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    if not args.log:
        return _parse_with_log(args, None)

    with RunLogger.open(Path(args.log)) as log:
        log.info(
            "parse_command_started",
            input=str(args.input),
            out=str(args.out),
        )
        try:
            return _parse_with_log(args, log)
        except Exception as e:
            log.exception("parse_command_failed", exc=e)
            raise


def _cmd_insights(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    raw = _read_input(cfg, args.input)
    result = import_posts(raw, config=cfg, source=str(args.input))

    stats = summarize_posts(
        result.posts,
        top_topics=cfg.insights.top_topics,
        top_authors=cfg.insights.top_authors,
    )
    print(json.dumps(stats.to_dict(), indent=2, ensure_ascii=False, sort_keys=True))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except (ConfigError, ImportInputError) as e:
        _eprint(str(e))
        return 2
    except (ImportFormatError, ExportError) as e:
        _eprint(str(e))
        return 3
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
