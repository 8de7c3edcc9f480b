"""Fatal error types for autocil.

Each class carries the exit status documented for its condition class:

  1 - Generic failure (including per-target failures)
  2 - Validation error (bad arguments, unresolvable targets)
  3 - Environment precondition not met (inside tmux, teamocil missing)
"""

import click

EXIT_FAILURE = 1
EXIT_VALIDATION = 2
EXIT_ENVIRONMENT = 3


class AutocilError(click.ClickException):
    """Base error; click prints it as ``Error: <message>`` on stderr."""

    exit_code = EXIT_FAILURE


class ValidationError(AutocilError):
    """The command line cannot be satisfied as given."""

    exit_code = EXIT_VALIDATION


class EnvironmentPreconditionError(AutocilError):
    """The execution environment cannot run a session."""

    exit_code = EXIT_ENVIRONMENT


class TargetError(AutocilError):
    """A single target cannot be processed."""

    exit_code = EXIT_FAILURE
