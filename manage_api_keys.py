#!/usr/bin/env python3
"""
Management script for API keys and the database schema.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from api.auth import generate_api_key, mask_api_key
from api.config import config as api_config
from api.services import BookServices
from utilities.config import config
from utilities.logger import setup_logging


def generate_key():
    """Print a new API key."""
    api_key = generate_api_key()
    print(f"🔑 New API key: {api_key}")
    print()
    print("Add it to the comma-separated API_KEYS setting to enable it.")


def list_keys():
    """List the configured API keys, masked."""
    api_keys = api_config.get_api_keys()
    if not api_keys:
        print("⚠️  No API keys configured. Write requests will be rejected.")
        return

    print(f"🔐 {len(api_keys)} API key(s) configured:")
    for api_key in api_keys:
        print(f"   {mask_api_key(api_key)}")


async def init_database():
    """Create the books table and search index."""
    services = BookServices.build(config.get_database_path())
    try:
        await services.initializer.initialize()
        print(f"✅ Database ready: {config.database_path}")
    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        sys.exit(1)


def main():
    """Main function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_api_keys.py [generate|list|init-db]")
        print()
        print("Commands:")
        print("  generate - Generate a new API key")
        print("  list     - List configured API keys (masked)")
        print("  init-db  - Create the database schema")
        sys.exit(1)

    command = sys.argv[1].lower()

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug
    )

    if command == "generate":
        generate_key()
    elif command == "list":
        list_keys()
    elif command == "init-db":
        asyncio.run(init_database())
    else:
        print(f"❌ Unknown command: {command}")
        print("Available commands: generate, list, init-db")
        sys.exit(1)


if __name__ == "__main__":
    main()
