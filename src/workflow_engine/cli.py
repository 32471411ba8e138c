"""CLI entrypoint for the workflow engine."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from workflow_engine import __version__
from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.definition_store import DefinitionStore
from workflow_engine.engine.documents import load_definition_file
from workflow_engine.engine.errors import WorkflowEngineError
from workflow_engine.engine.logging import configure_logging
from workflow_engine.server.config import ServerSettings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-engine",
        description="Workflow definition registry and state-machine engine",
    )
    parser.add_argument("--version", action="version", version=f"workflow-engine {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default=None, help="Bind address (overrides WORKFLOW_ENGINE_HOST)")
    serve.add_argument(
        "--port", type=int, default=None, help="Bind port (overrides WORKFLOW_ENGINE_PORT)"
    )
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (dev only)")

    check = subparsers.add_parser(
        "check-definition",
        help="Validate a definition JSON file (one object or a list) without starting a server",
    )
    check.add_argument("path", type=Path, help="Path to the definition JSON file")

    return parser


def _check_definition(path: Path) -> int:
    try:
        documents = load_definition_file(path)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"{path} is not a definition document:", file=sys.stderr)
        print(e, file=sys.stderr)
        return 1

    # A scratch store also catches id collisions within the file.
    store = DefinitionStore()
    failures = 0
    for document in documents:
        try:
            definition = store.create(document.to_domain())
        except WorkflowEngineError as e:
            failures += 1
            print(f"INVALID {document.id!r}: {e.kind}: {e.message}")
            continue
        print(
            f"OK {definition.id!r}: {len(definition.states)} states, "
            f"{len(definition.actions)} actions"
        )
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
        server_settings = ServerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    if args.command == "check-definition":
        return _check_definition(args.path)

    import uvicorn

    host = args.host or server_settings.host
    port = args.port or server_settings.port
    logger.info("Starting server", extra={"host": host, "port": port})
    uvicorn.run(
        "workflow_engine.server.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
