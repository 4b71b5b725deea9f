import argparse
import logging
import sys
from typing import List, Optional

from .core.ast_parser import ClassLocator, PhpReflector
from .core.config import DocweaveConfig, load_config
from .core.errors import ConfigError, ResolutionError
from .core.generator import ConfigGenerator, ConsoleOutput


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


logger = logging.getLogger(__name__)


def build_locator(config: DocweaveConfig) -> ClassLocator:
    """Use the configured autoload rules, else the project's composer.json."""
    if config.autoload is not None:
        return ClassLocator(
            psr4=config.autoload.psr4,
            classmap=config.autoload.classmap,
            base_dir=config.project_root,
        )
    return ClassLocator.from_composer(config.project_root)


def run(config: DocweaveConfig, only: Optional[List[str]] = None, verbose: bool = False) -> int:
    """Run one generator per configured class.

    Returns:
        Process exit code: 0 on success, 1 if any class failed to resolve
    """
    reflector = PhpReflector(build_locator(config))
    output = ConsoleOutput(verbose=verbose)
    wanted = {name.lstrip("\\").lower() for name in only or []}

    failures = 0
    written = 0
    for entry in config.classes:
        if wanted and entry.class_name.lstrip("\\").lower() not in wanted:
            continue
        generator = ConfigGenerator.from_config(entry, config, reflector, output=output)
        try:
            if generator.generate():
                written += 1
        except ResolutionError as e:
            logger.error(str(e))
            failures += 1

    logger.info(f"Updated {written} file(s), {failures} failure(s)")
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for docweave."""
    parser = argparse.ArgumentParser(
        description="docweave - annotate PHP classes with their virtual members"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Configuration file (default: $DOCWEAVE_CONFIG or docweave.yaml)"
    )
    parser.add_argument(
        "--class",
        dest="classes",
        action="append",
        default=[],
        metavar="FQCN",
        help="Only process this class (repeatable)"
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard existing @property/@method tags"
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace existing tags redefined by the configuration"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(str(e))
        return 2

    if args.reset:
        config.reset = True
    if args.overwrite:
        config.overwrite = True

    try:
        return run(config, only=args.classes, verbose=args.log_level == "DEBUG")
    except ConfigError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
