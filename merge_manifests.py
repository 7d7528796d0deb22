#!/usr/bin/env python3
import sys
import argparse
from publisher.models import BuildRequest, Settings, parse_platforms
from publisher.services.manifest_merge_service import ManifestMergeService
from publisher.utils.logging import setup_logger


def main():
    parser = argparse.ArgumentParser(description='Merge per-platform digests into a multi-arch manifest list')
    parser.add_argument('--image-name', required=True, help='The name of the image to publish')
    parser.add_argument('--platforms', help='Platforms that must all be present before merging')
    parser.add_argument('--ref', help='Branch or tag to derive image tags from instead of the current checkout')
    parser.add_argument('--dry-run', action='store_true', help='Print the docker commands without running them')
    args = parser.parse_args()

    logger = setup_logger("MergeManifests")

    try:
        request = BuildRequest(
            image_name=args.image_name,
            docker_path="",
            platforms=parse_platforms(args.platforms) if args.platforms else (),
        )
        logger.info(f"Starting manifest merge of {args.image_name}")
        service = ManifestMergeService(request, Settings.from_env(), dry_run=args.dry_run, ref=args.ref)
        service.run()
        logger.info("Manifest merge completed successfully")
        return 0
    except Exception as e:
        logger.error(f"Manifest merge failed: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
