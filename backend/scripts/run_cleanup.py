"""
Manual retention sweep for expired posts.

NOTE: Automatic cleanup is handled by RetentionScheduler (runs daily at 2 AM UTC).
This script is provided for:
- Manual/emergency cleanup operations
- Testing the sweep against a development Firebase project

It runs exactly one sweep, prints the result as JSON and exits with
status 1 if the sweep failed.
"""
import asyncio
import json
import logging
import sys
import os

# Add the parent directory to sys.path to allow imports from src
sys.path.append(os.path.join(os.path.dirname(__file__), '../src'))

from core.config import LOG_LEVEL
from core.firebase import get_blob_store, get_record_store
from services.retention_sweeper import RetentionSweeper


def main() -> int:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    print("Starting retention sweep...")
    sweeper = RetentionSweeper(get_record_store(), get_blob_store())
    result = asyncio.run(sweeper.run_sweep())
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
