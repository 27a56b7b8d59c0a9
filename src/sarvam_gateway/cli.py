"""
Command-Line Interface for sarvam-gateway.

Runs the HTTP server, or either gateway flow directly without HTTP.

Usage Examples:
    # Start the HTTP server (port from PORT / settings.yaml)
    sarvam-gateway serve
    sarvam-gateway serve --host 127.0.0.1 --port 8080 --reload

    # Text-to-speech, files written to the configured audio directory
    sarvam-gateway tts "Namaste, aap kaise hain?" --language hi-IN

    # Override output directory and print a JSON summary
    sarvam-gateway tts "Hello" --out-dir ./out --json

    # Document intelligence
    sarvam-gateway doc report.pdf --language en-IN --output-format md --json

Environment Variables:
    SARVAM_API_KEY: Provider API key (required for tts/doc)
    SARVAM_GATEWAY_SETTINGS: Path to settings.yaml
    PORT: HTTP listen port
"""

from __future__ import annotations

import argparse
import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sarvam_gateway.core.config import Settings, apply_env_overrides, load_settings
from sarvam_gateway.core.logging import configure_logging, get_logger, info, set_request_id
from sarvam_gateway.providers.base import get_provider
from sarvam_gateway.services.document_service import DocumentService, DocumentUpload
from sarvam_gateway.services.errors import GatewayError
from sarvam_gateway.services.speech_service import SpeechRequest, SpeechService

_LOG = get_logger("sarvam-gateway.cli")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Optional list of arguments (defaults to sys.argv).

    Returns:
        Parsed argument namespace; ``command`` names the subcommand.
    """
    parser = argparse.ArgumentParser(prog="sarvam-gateway", description="Sarvam AI gateway")
    parser.add_argument("--settings", help="Path to settings.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", help="Bind address (default from settings)")
    serve.add_argument("--port", type=int, help="Listen port (default from PORT / settings)")
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    tts = sub.add_parser("tts", help="Convert text to speech")
    tts.add_argument("text", help="Text to synthesize")
    tts.add_argument("--speaker", help="Voice name")
    tts.add_argument("--language", help="Target language code, e.g. hi-IN")
    tts.add_argument("--model", help="TTS model, e.g. bulbul:v3")
    tts.add_argument("--pace", type=float, help="Speech pace multiplier")
    tts.add_argument("--sample-rate", type=int, help="Output sample rate in Hz")
    tts.add_argument("--out-dir", help="Directory for the WAV files")
    tts.add_argument("--json", action="store_true", help="Print JSON summary")

    doc = sub.add_parser("doc", help="Process a PDF or ZIP document")
    doc.add_argument("file", help="Path to the document")
    doc.add_argument("--language", help="Document language")
    doc.add_argument("--output-format", help="Output format (html, md, ...)")
    doc.add_argument("--json", action="store_true", help="Print JSON summary")

    return parser.parse_args(argv)


def _load(args: argparse.Namespace) -> Settings:
    path = args.settings or os.getenv("SARVAM_GATEWAY_SETTINGS", "config/settings.yaml")
    try:
        return load_settings(path)
    except FileNotFoundError:
        return Settings(raw=apply_env_overrides({}))


def _with_audio_dir(settings: Settings, audio_dir: str) -> Settings:
    raw = copy.deepcopy(settings.raw)
    raw.setdefault("speech", {})["audio_dir"] = audio_dir
    return Settings(raw=raw)


def _run_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    cfg = settings.get_gateway_config().server
    uvicorn.run(
        "sarvam_gateway.main:app",
        host=args.host or cfg.host,
        port=args.port or cfg.port,
        reload=args.reload,
    )
    return 0


def _run_tts(args: argparse.Namespace, settings: Settings) -> Dict[str, Any]:
    if args.out_dir:
        settings = _with_audio_dir(settings, args.out_dir)

    service = SpeechService(settings, get_provider(settings))
    result = service.convert(
        SpeechRequest(
            text=args.text,
            target_language_code=args.language,
            speaker=args.speaker,
            pace=args.pace,
            speech_sample_rate=args.sample_rate,
            model=args.model,
        )
    )
    return {
        "files": [str(a.path) for a in result.artifacts],
        "bytes": sum(a.size_bytes for a in result.artifacts),
        "request": result.parameters,
        "seconds": round(result.total_seconds, 3),
    }


def _run_doc(args: argparse.Namespace, settings: Settings) -> Dict[str, Any]:
    path = Path(args.file)
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")

    service = DocumentService(settings, get_provider(settings))
    with path.open("rb") as f:
        upload = DocumentUpload(filename=path.name, stream=f, size_bytes=path.stat().st_size)
        result = service.process(upload, language=args.language, output_format=args.output_format)
    return result.to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        Exit code: 0 on success, 1 when the gateway reports an error.
    """
    args = _parse_args(argv)
    if args.settings:
        # The served app (and its reloader process) reads the path from the environment
        os.environ["SARVAM_GATEWAY_SETTINGS"] = args.settings
    configure_logging()
    set_request_id(f"cli-{uuid4().hex[:8]}")
    settings = _load(args)

    if args.command == "serve":
        return _run_serve(args, settings)

    try:
        if args.command == "tts":
            summary = _run_tts(args, settings)
        else:
            summary = _run_doc(args, settings)
    except GatewayError as e:
        print(json.dumps(e.to_dict(), ensure_ascii=False))
        return 1

    info(_LOG, "cli_done", command=args.command)
    if args.json:
        print(json.dumps(summary, ensure_ascii=False, default=str))
    elif args.command == "tts":
        for f in summary["files"]:
            print(f)
    else:
        print(f"{summary['jobId']} {summary['jobState']}")
        print(json.dumps(summary["downloadLinks"], ensure_ascii=False, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
