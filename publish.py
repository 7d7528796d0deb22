#!/usr/bin/env python3
import sys
import argparse
from publisher.models import Settings
from publisher.services.publish_service import PublishService
from publisher.utils.logging import setup_logger


def main():
    parser = argparse.ArgumentParser(description='Build every platform of the catalogued images and publish manifest lists')
    parser.add_argument('--image', help='Only publish this image from the catalogue')
    parser.add_argument('--ref', help='Branch or tag to derive image tags from instead of the current checkout')
    parser.add_argument('--max-workers', type=int, default=8, help='Platform builds running at the same time')
    parser.add_argument('--dry-run', action='store_true', help='Print the docker commands without running them')
    args = parser.parse_args()

    logger = setup_logger("Publish")

    try:
        settings = Settings.from_env()
        logger.info(f"Starting publish with images file: {settings.images_file}")
        service = PublishService(settings, image_name=args.image, dry_run=args.dry_run, ref=args.ref, max_workers=args.max_workers)
        service.run()
        logger.info("Publish completed successfully")
        return 0
    except Exception as e:
        logger.error(f"Publish failed: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
