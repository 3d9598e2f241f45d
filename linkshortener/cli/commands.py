"""Interactive command processor

Parses one text command per line and calls the link and user services.
Every application error is reported to the user and logged; the session
keeps going.

Commands:
    login [user-id]                     log in (a new user is created when needed)
    logout                              forget the current user
    whoami                              show the current user
    set-email <email|->                 set (or clear with '-') the notification address
    create <url> [quota] [description]  shorten a URL
    list                                list your links
    stats <code>                        show link statistics
    edit <code> <quota>                 change a link's click quota
    deactivate <code>                   deactivate a link
    delete <code>                       delete a link
    goto <code> | <code>                resolve a link and open it in the browser
    cleanup                             sweep expired links and idle users now
    help                                show this help
    exit                                quit

Example:
    >>> processor = CommandProcessor(registry, directory, sweeper)
    >>> processor.execute('login alice')
    True
    >>> processor.execute('create https://example.com 5')
    True
    >>> processor.execute('exit')
    False
"""

import logging
import shlex
import sys
import webbrowser
from collections.abc import Callable
from typing import TextIO

from linkshortener.dao.exceptions import UserNotFoundError
from linkshortener.exceptions import InvalidInputError, LinkShortenerError
from linkshortener.models import LinkStatistics, UserModel
from linkshortener.services import ExpirySweeper, LinkRegistry, UserDirectory


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M'
EXIT_COMMANDS = frozenset({'exit', 'quit'})

HELP_TEXT = """\
Available commands:
  login [user-id]                     log in (a new user is created when needed)
  logout                              forget the current user
  whoami                              show the current user
  set-email <email|->                 set (or clear with '-') the notification address
  create <url> [quota] [description]  shorten a URL
  list                                list your links
  stats <code>                        show link statistics
  edit <code> <quota>                 change a link's click quota
  deactivate <code>                   deactivate a link
  delete <code>                       delete a link
  goto <code>                         open a short link (typing the bare code works too)
  cleanup                             sweep expired links and idle users now
  help                                show this help
  exit                                quit
"""


def _parse_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise InvalidInputError(f"'{name}' must be an integer (given value: '{value}').") from e


class CommandProcessor:
    """Dispatch text commands to the link and user services.

    Attributes:
        registry (LinkRegistry): link operations
        directory (UserDirectory): user sessions
        sweeper (ExpirySweeper): used by `cleanup`
        out (TextIO): where results are printed
        opener (Callable[[str], object]): opens resolved URLs (webbrowser.open)
        current_user (str | None): logged-in user id
    """

    def __init__(
        self,
        registry: LinkRegistry,
        directory: UserDirectory,
        sweeper: ExpirySweeper,
        out: TextIO | None = None,
        opener: Callable[[str], object] = webbrowser.open,
    ):
        self.registry = registry
        self.directory = directory
        self.sweeper = sweeper
        self.out = out if out is not None else sys.stdout
        self.opener = opener
        self.current_user: str | None = None

        self._handlers: dict[str, Callable[[list[str]], None]] = {
            'login': self._login,
            'logout': self._logout,
            'whoami': self._whoami,
            'set-email': self._set_email,
            'create': self._create,
            'list': self._list,
            'stats': self._stats,
            'edit': self._edit,
            'deactivate': self._deactivate,
            'delete': self._delete,
            'goto': self._goto,
            'cleanup': self._cleanup,
            'help': self._help,
        }

    @property
    def prompt(self) -> str:
        return f'user:{self.current_user[:8]}> ' if self.current_user else 'guest> '

    def execute(self, line: str) -> bool:
        """Run one command line

        Returns:
            bool: False once the user asked to exit, True otherwise
        """
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            self._print(f'Error: {e}')
            return True
        if not tokens:
            return True

        command, args = tokens[0].lower(), tokens[1:]
        if command in EXIT_COMMANDS:
            return False

        handler = self._handlers.get(command)
        if handler is None and not args:
            # a bare short code is a shortcut for `goto <code>`
            handler, args = self._goto, [tokens[0]]
        if handler is None:
            self._print(f"Unknown command '{command}'. Type 'help' for the list of commands.")
            return True

        try:
            handler(args)
        except LinkShortenerError as e:
            logger.info('Command failed.', extra={'command': command, 'errorCode': e.error_code})
            self._print(f'Error: {e}')
        return True

    # ---------------------------------------------------------------
    # Session
    # ---------------------------------------------------------------

    def _login(self, args: list[str]) -> None:
        user = self.directory.get_or_create(args[0] if args else None)
        self.current_user = user.user_id
        self._print(f'Logged in as {user.user_id}')

    def _logout(self, args: list[str]) -> None:
        self.current_user = None
        self._print('Logged out.')

    def _whoami(self, args: list[str]) -> None:
        user = self.directory.get_user(self._require_user())
        links = self.registry.list_owned(user.user_id)
        self._print(self._format_user(user, total=len(links), active=sum(link.can_be_accessed for link in links)))

    def _set_email(self, args: list[str]) -> None:
        user_id = self._require_user()
        self._require_args(args, 1, 'set-email <email|->')
        user = self.directory.set_email(user_id, None if args[0] == '-' else args[0])
        self._print(f'Notification email set to {user.email}' if user.email else 'Notification email cleared.')

    # ---------------------------------------------------------------
    # Links
    # ---------------------------------------------------------------

    def _create(self, args: list[str]) -> None:
        user_id = self._require_user()
        self._require_args(args, 1, 'create <url> [quota] [description]')
        quota = _parse_int(args[1], 'quota') if len(args) > 1 else None
        description = ' '.join(args[2:]) or None

        link = self.registry.create_link(user_id, args[0], quota=quota, description=description)
        self._print(
            f'Short code: {link.shortcode}\n'
            f'Target:     {link.target}\n'
            f'Quota:      {link.quota} clicks\n'
            f'Expires:    {link.expires_at.strftime(TIMESTAMP_FORMAT)} UTC'
        )

    def _list(self, args: list[str]) -> None:
        links = self.registry.list_owned(self._require_user())
        if not links:
            self._print('You have no links yet.')
            return

        rows = [f'{"CODE":<10} {"TARGET":<50} {"CLICKS":>12} {"STATUS":<14} {"EXPIRES":<16}']
        for link in links:
            target = link.target if len(link.target) <= 50 else f'{link.target[:47]}...'
            rows.append(
                f'{link.shortcode:<10} {target:<50} {f"{link.clicks}/{link.quota}":>12} '
                f'{link.status:<14} {link.expires_at.strftime(TIMESTAMP_FORMAT):<16}'
            )
        self._print('\n'.join(rows))

    def _stats(self, args: list[str]) -> None:
        self._require_args(args, 1, 'stats <code>')
        self._print(self._format_statistics(self.registry.statistics(args[0], self._require_user())))

    def _edit(self, args: list[str]) -> None:
        user_id = self._require_user()
        self._require_args(args, 2, 'edit <code> <quota>')
        link = self.registry.update_quota(args[0], user_id, _parse_int(args[1], 'quota'))
        self._print(f'Quota of {link.shortcode} set to {link.quota} ({link.status}).')

    def _deactivate(self, args: list[str]) -> None:
        user_id = self._require_user()
        self._require_args(args, 1, 'deactivate <code>')
        link = self.registry.deactivate(args[0], user_id)
        self._print(f'Link {link.shortcode} deactivated.')

    def _delete(self, args: list[str]) -> None:
        user_id = self._require_user()
        self._require_args(args, 1, 'delete <code>')
        self.registry.delete(args[0], user_id)
        self._print(f'Link {args[0]} deleted.')

    def _goto(self, args: list[str]) -> None:
        self._require_args(args, 1, 'goto <code>')
        target = self.registry.resolve(args[0])
        self._print(f'Opening {target}')
        self.opener(target)

    # ---------------------------------------------------------------
    # Maintenance
    # ---------------------------------------------------------------

    def _cleanup(self, args: list[str]) -> None:
        result = self.sweeper.sweep()
        users = self.directory.cleanup_inactive()
        if self.current_user in users:
            self.current_user = None
        self._print(
            f'Expired links: {result.expired} (deleted {len(result.deleted)}, deactivated {len(result.deactivated)}, '
            f'failed {len(result.failed)}); inactive users removed: {len(users)}'
        )

    def _help(self, args: list[str]) -> None:
        self._print(HELP_TEXT.rstrip())

    # ---------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------

    def _require_user(self) -> str:
        if self.current_user is None:
            raise InvalidInputError("Please log in first ('login [user-id]').")
        if self.directory.find_user(self.current_user) is None:
            self.current_user = None
            raise UserNotFoundError('Your session has expired, please log in again.')
        return self.current_user

    def _require_args(self, args: list[str], count: int, usage: str) -> None:
        if len(args) < count:
            raise InvalidInputError(f'Usage: {usage}')

    def _print(self, text: str) -> None:
        print(text, file=self.out)

    @staticmethod
    def _format_user(user: UserModel, total: int, active: int) -> str:
        return '\n'.join(
            [
                f'User ID:       {user.user_id}',
                f'Created:       {user.created_at.strftime(TIMESTAMP_FORMAT)} UTC',
                f'Last activity: {user.last_activity.strftime(TIMESTAMP_FORMAT)} UTC',
                f'Total links:   {total}',
                f'Active links:  {active}',
                f'Email:         {user.email or "not set"}',
            ]
        )

    @staticmethod
    def _format_statistics(stats: LinkStatistics) -> str:
        return '\n'.join(
            [
                f'Short code:  {stats.shortcode}',
                f'Target:      {stats.target}',
                f'Created:     {stats.created_at.strftime(TIMESTAMP_FORMAT)} UTC',
                f'Expires:     {stats.expires_at.strftime(TIMESTAMP_FORMAT)} UTC',
                f'Hours left:  {stats.hours_left}',
                f'Clicks:      {stats.clicks}/{stats.quota}',
                f'Usage:       {stats.usage_percentage:.1f}%',
                f'Status:      {stats.status}',
                f'Description: {stats.description or "-"}',
            ]
        )
