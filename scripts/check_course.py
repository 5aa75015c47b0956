#!/usr/bin/env python3
"""Check a course catalog for lessons and questions that cannot be graded."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from kali.config import load_config
from kali.content import ContentLoader
from kali.learning import AnswerEvaluator, find_course_problems
from kali.utils.errors import ContentError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def check(config_path: str, course_path: str = None, url: str = None) -> int:
    """Load the catalog and report every problem found.

    Returns:
        Process exit code: 0 if the catalog is clean, 1 otherwise
    """
    config = load_config(config_path)
    loader = ContentLoader(
        timeout=config.catalog.timeout, max_retries=config.catalog.max_retries
    )

    try:
        course = await loader.load(
            course_path or config.catalog.path, url=url or config.catalog.url
        )
    except (ContentError, FileNotFoundError) as e:
        logger.error(f"Could not load catalog: {e}")
        return 1

    problems = find_course_problems(course, AnswerEvaluator(config.evaluation))
    for problem in problems:
        logger.error(str(problem))

    if problems:
        logger.error(f"{len(problems)} problems in {course.name!r}")
        return 1

    logger.info(f"{course.name!r} is valid: {len(course.lessons)} lessons")
    return 0


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config", default=str(project_root / "config.yaml"), help="Config file path"
    )
    parser.add_argument("--course", help="Course YAML path, overrides the config")
    parser.add_argument("--url", help="Course YAML URL, overrides the config")
    args = parser.parse_args()

    sys.exit(asyncio.run(check(args.config, args.course, args.url)))


if __name__ == "__main__":
    main()
