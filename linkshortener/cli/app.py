"""Process entry point for the interactive link shortener

Startup procedure:
    - Step 1: Parse command line options
    - Step 2: Load configuration (YAML + environment) and initialize logging
    - Step 3: Wire stores, generator and services together
    - Step 4: Start the expiry sweeper
    - Step 5: Run the read-eval-print loop until `exit` or end of input
    - Step 6: Stop the sweeper within its grace period

Exit codes:
    0: normal shutdown
    1: configuration error

Example:
    $ linkshortener --config config/application.yaml --user alice
    user:alice> create https://example.com 10
"""

import argparse
import logging
import shlex
import sys
from dataclasses import dataclass, replace
from typing import TextIO

from linkshortener.cli.commands import CommandProcessor
from linkshortener.dao.memory import LinkMemoryDAO, UserMemoryDAO
from linkshortener.exceptions import ConfigurationError
from linkshortener.services import ExpirySweeper, LinkRegistry, NotificationService, UserDirectory
from linkshortener.utils import ShortCodeGenerator, ShortenerConfig, app_env, initialize_logging, load_config


logger = logging.getLogger(__name__)


@dataclass
class Application:
    """Fully wired service graph for one process."""

    config: ShortenerConfig
    registry: LinkRegistry
    directory: UserDirectory
    sweeper: ExpirySweeper


def build_application(config: ShortenerConfig) -> Application:
    directory = UserDirectory(UserMemoryDAO(), session_ttl_hours=config.user_session_ttl_hours)
    notifications = NotificationService(
        directory,
        expire_notification=config.expire_notification,
        limit_notification=config.limit_notification,
    )
    links = LinkMemoryDAO()
    generator = ShortCodeGenerator(config.generation_strategy, length=config.short_code_length)

    return Application(
        config=config,
        registry=LinkRegistry(links, generator, config, directory=directory, notifications=notifications),
        directory=directory,
        sweeper=ExpirySweeper(links, config, directory=directory, notifications=notifications),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='linkshortener', description='Interactive short link service.')
    parser.add_argument('--config', help='Path to the YAML configuration file (default: $SHORTENER_CONFIG or config/application.yaml)')
    parser.add_argument('--log-level', dest='log_level', help='Override the configured log level')
    parser.add_argument('--user', help='Log in as this user id on startup')
    return parser


def run_repl(processor: CommandProcessor, stdin: TextIO, interactive: bool) -> None:
    while True:
        if interactive:
            print(processor.prompt, end='', flush=True, file=processor.out)
        line = stdin.readline()
        if not line:
            break
        if not processor.execute(line):
            break


def main(argv: list[str] | None = None, stdin: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin

    try:
        config = load_config(args.config)
        if args.log_level:
            config = replace(config, log_level=args.log_level)
    except ConfigurationError as e:
        print(f'Configuration error: {e}', file=sys.stderr)
        return 1

    initialize_logging(config.log_level, config.log_format, config.log_file)
    app = build_application(config)
    processor = CommandProcessor(app.registry, app.directory, app.sweeper)
    logger.info('Application started.', extra={'appEnv': app_env(), 'generationStrategy': str(config.generation_strategy)})

    if args.user:
        processor.execute(shlex.join(['login', args.user]))

    app.sweeper.start()
    try:
        print("Link shortener ready. Type 'help' for the list of commands.", file=processor.out)
        run_repl(processor, stdin, interactive=stdin.isatty())
    except KeyboardInterrupt:
        print(file=processor.out)
    finally:
        app.sweeper.stop()

    print('Goodbye!', file=processor.out)
    return 0


if __name__ == '__main__':
    sys.exit(main())
