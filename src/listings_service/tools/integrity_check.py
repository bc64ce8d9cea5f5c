#!/usr/bin/env python
"""
Image integrity check for the uploads directory.

Compares image rows with their properties and the files on disk and prints a
JSON report. With --repair, orphaned and missing-file rows are deleted and the
missing-main policy is applied. Exits with status 1 while issues remain.
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from listings_service.config import settings
from listings_service.db import AsyncSessionLocal, engine
from listings_service.logging_config import logger
from listings_service.services.integrity import MISSING_MAIN_POLICIES, IntegrityChecker
from listings_service.utils.storage import UploadStorage


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check image rows against stored files")
    parser.add_argument(
        "--repair",
        action="store_true",
        help="Delete orphaned and missing-file rows",
    )
    parser.add_argument(
        "--missing-main-policy",
        choices=MISSING_MAIN_POLICIES,
        default=settings.MISSING_MAIN_POLICY,
        help="What to do with properties that have images but no main image",
    )
    return parser


async def run(repair: bool, policy: str) -> dict:
    storage = UploadStorage.from_settings(settings)
    try:
        async with AsyncSessionLocal() as session:
            checker = IntegrityChecker(session, storage, policy)
            report = await checker.repair() if repair else await checker.check()
    finally:
        await engine.dispose()
    return report.to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger.info(
        f"Running image integrity check (repair={args.repair}, "
        f"missing_main_policy={args.missing_main_policy})"
    )
    report = asyncio.run(run(args.repair, args.missing_main_policy))
    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 1 if report["has_issues"] else 0


if __name__ == "__main__":
    sys.exit(main())
