#!/usr/bin/env python3
import sys
import argparse
from publisher.models import BuildRequest, Platform, Settings
from publisher.services.platform_build_service import PlatformBuildService
from publisher.utils.logging import setup_logger


def main():
    parser = argparse.ArgumentParser(description='Build and push one platform of an image')
    parser.add_argument('--image-name', required=True, help='The name of the image to build and publish')
    parser.add_argument('--docker-path', required=True, help='The path to the directory holding the image build contexts')
    parser.add_argument('--platform', required=True, help='The platform to build, e.g. linux/arm64')
    parser.add_argument('--base-image', help='The image to be used as a base for system containers')
    parser.add_argument('--base-app-image', help='The image to be used as a base for app containers')
    parser.add_argument('--ref', help='Branch or tag to derive image tags from instead of the current checkout')
    parser.add_argument('--dry-run', action='store_true', help='Print the docker commands without running them')
    args = parser.parse_args()

    logger = setup_logger("BuildPlatform")

    try:
        platform = Platform.parse(args.platform)
        request = BuildRequest(
            image_name=args.image_name,
            docker_path=args.docker_path,
            platforms=(platform,),
            base_image=args.base_image,
            base_app_image=args.base_app_image,
        )
        logger.info(f"Starting build of {args.image_name} for {platform}")
        service = PlatformBuildService(request, platform, Settings.from_env(), dry_run=args.dry_run, ref=args.ref)
        service.run()
        logger.info("Platform build completed successfully")
        return 0
    except Exception as e:
        logger.error(f"Platform build failed: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
