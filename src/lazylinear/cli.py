import argparse
import asyncio
import logging
import logging.handlers
import os
import sys

from dotenv import load_dotenv

from lazylinear.config import AppConfig, default_config_dir, default_config_path, load_config, save_config
from lazylinear.data import DataManager
from lazylinear.linear import LinearApiError, LinearClient
from lazylinear.state import ViewState

LOG_FILE_NAME = "lazylinear.log"


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(prog="lazylinear", description="Browse Linear issues in the terminal")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("doctor", help="Check config, API key and connectivity")
    set_key = subparsers.add_parser("set-key", help="Save a Linear API key to the config file")
    set_key.add_argument("api_key", help="Personal Linear API key")

    args = parser.parse_args()
    configure_logging()

    if args.command == "doctor":
        sys.exit(asyncio.run(doctor()))
    elif args.command == "set-key":
        sys.exit(set_api_key(args.api_key))
    else:
        sys.exit(run_tui())


def configure_logging() -> None:
    """Send logs to a rotating file; the terminal belongs to the TUI."""
    level_name = os.getenv("LAZYLINEAR_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    log_dir = default_config_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_dir / LOG_FILE_NAME, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def run_tui() -> int:
    from lazylinear.app import LazyLinear

    try:
        app = LazyLinear()
        app.run()
    except Exception as e:
        logging.getLogger(__name__).exception("terminal UI failed")
        print(f"lazylinear: {e}", file=sys.stderr)
        return 1
    return app.return_code or 0


async def doctor() -> int:
    """Check for a config file, an API key and a working connection."""
    print("🩺 Running LazyLinear Doctor...")

    config_path = default_config_path()
    print(f"[{'✓' if config_path.exists() else '✕'}] config file ({config_path})")

    file_key = load_config(config_path).api_key
    env_key = os.getenv("LINEAR_API_KEY")
    source = "environment" if env_key else ("config file" if file_key else "missing")
    print(f"[{'✓' if (env_key or file_key) else '✕'}] API key ({source})")

    config = AppConfig.from_env(config_path)
    if not config.api_key:
        print("\nRun 'lazylinear set-key <KEY>' or set LINEAR_API_KEY.")
        return 1

    print("   - Testing Linear API connection...")
    client = LinearClient(api_key=config.api_key, timeout=config.request_timeout_seconds)
    try:
        viewer = await client.get_viewer()
    except LinearApiError as e:
        print(f"[✕] connection: {e}")
        return 1
    print(f"[✓] authenticated as {viewer.name}")

    print("   - Loading issues...")
    data_manager = DataManager(config=config, client=client)
    state = ViewState()
    await data_manager.initialize(state)
    summary = data_manager.fetch_status_summary()
    if data_manager.last_fetch_error:
        print(f"[✕] issues: {summary}")
        return 1
    scope = state.current_team.name if state.current_team else "all teams"
    print(f"[✓] issues: {summary} ({len(state.all_issues)} loaded from {scope})")
    print("\nDoctor check complete.")
    return 0


def set_api_key(api_key: str) -> int:
    api_key = api_key.strip()
    if not api_key:
        print("❌ API key must not be empty.")
        return 1
    path = default_config_path()
    current = load_config(path)
    saved_to = save_config(
        AppConfig(api_key=api_key, request_timeout_seconds=current.request_timeout_seconds),
        path,
    )
    print(f"✅ API key saved to {saved_to}")
    return 0


if __name__ == "__main__":
    main()
