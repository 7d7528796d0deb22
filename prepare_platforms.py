#!/usr/bin/env python3
import os
import sys
import argparse
from publisher.models import Settings
from publisher.services.prepare_platforms_service import PreparePlatformsService
from publisher.utils.logging import setup_logger


def main():
    parser = argparse.ArgumentParser(description='Emit the per-platform build matrix')
    parser.add_argument('--platforms', default=os.environ.get("PLATFORMS"), help='Comma separated platforms, e.g. linux/amd64,linux/arm64')
    args = parser.parse_args()

    logger = setup_logger("PreparePlatforms")

    try:
        service = PreparePlatformsService(args.platforms, Settings.from_env())
        service.run()
        return 0
    except Exception as e:
        logger.error(f"Platform preparation failed: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
