#!/usr/bin/env python3
"""
Startup script for the Field Ops API
Serves the JSON API and the customer portal endpoints
"""

import sys
import logging
import argparse
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv(project_root / ".env")

from field_ops.config.settings import get_app_settings
from field_ops.logging_conf import configure_logging

logger = logging.getLogger("field_ops.startup")


def check_data_file(path: str) -> bool:
    """Check that the data file location is usable"""
    data_path = Path(path).resolve()
    if data_path.exists():
        if not data_path.is_file():
            print(f"❌ {data_path} exists but is not a file")
            return False
        print(f"✅ Using existing data file: {data_path}")
        return True

    parent = data_path.parent
    if parent.exists() and not parent.is_dir():
        print(f"❌ {parent} is not a directory")
        return False
    print(f"ℹ️  {data_path} will be created on the first write")
    return True


def start_field_ops(host: str, port: int, reload: bool = False, log_level: str = "INFO"):
    """Start the Field Ops API"""
    import uvicorn

    print(f"🚀 Starting Field Ops API on {host}:{port}")
    print(f"📊 Health check: http://{host}:{port}/health")
    print(f"🧾 API root: http://{host}:{port}/api")
    print()

    uvicorn.run(
        "field_ops.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level.lower(),
        log_config=None,
    )


def main():
    """Main entry point"""
    settings = get_app_settings()

    parser = argparse.ArgumentParser(description="Start the Field Ops API")
    parser.add_argument("--host", default=settings.HOST, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Log level")
    parser.add_argument("--json-logs", action="store_true", default=settings.JSON_LOGS,
                        help="Emit one JSON object per log line")
    parser.add_argument("--check-only", action="store_true", help="Only check configuration and exit")

    args = parser.parse_args()

    configure_logging(args.log_level, json_logs=args.json_logs)

    print("🔧 Field Ops Startup")
    print("=" * 45)

    print("📁 Checking data file...")
    if not check_data_file(settings.DATA_FILE):
        sys.exit(1)

    if args.check_only:
        print("✅ All checks passed!")
        return

    try:
        start_field_ops(host=args.host, port=args.port, reload=args.reload, log_level=args.log_level)
    except Exception as e:
        logger.exception("Failed to start", extra={"evt": "startup_failed"})
        print(f"❌ Failed to start Field Ops API: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
