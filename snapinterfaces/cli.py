# -*- Mode:Python; indent-tabs-mode:nil; tab-width:4 -*-
#
# Copyright 2026 Canonical Ltd.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License version 3 as
# published by the Free Software Foundation.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

"""Command-line application entry point."""

import contextlib
import os
import sys
from pathlib import Path

import craft_cli
from craft_application.util import strtobool
from craft_cli import ArgumentParsingError, EmitterMode, ProvideHelpException, emit

from snapinterfaces import __version__, commands, errors, interfaces
from snapinterfaces.os_release import get_release_info

COMMAND_GROUPS = [
    craft_cli.CommandGroup(
        "Interfaces",
        [
            commands.ListInterfacesCommand,
            commands.BaseDeclarationCommand,
            commands.ConnectedPolicyCommand,
        ],
    ),
    craft_cli.CommandGroup("Other", [commands.VersionCommand]),
]

GLOBAL_ARGS = [
    craft_cli.GlobalArgument(
        "version", "flag", "-V", "--version", "Show the application version and exit"
    ),
    craft_cli.GlobalArgument(
        "os_release",
        "option",
        None,
        "--os-release",
        "Path to the os-release file of the system to generate policy for",
    ),
]


def get_verbosity() -> EmitterMode:
    """Return the verbosity level to use.

    If SNAPINTERFACES_ENABLE_DEVELOPER_DEBUG is set, the default verbosity
    is EmitterMode.DEBUG. SNAPINTERFACES_VERBOSITY_LEVEL, if set, takes
    precedence.
    """
    verbosity = EmitterMode.BRIEF

    with contextlib.suppress(ValueError):
        if strtobool(os.getenv("SNAPINTERFACES_ENABLE_DEVELOPER_DEBUG", "n").strip()):
            verbosity = EmitterMode.DEBUG

    verbosity_env = os.getenv("SNAPINTERFACES_VERBOSITY_LEVEL")
    if verbosity_env:
        try:
            verbosity = EmitterMode[verbosity_env.strip().upper()]
        except KeyError:
            values = ", ".join(e.name.lower() for e in EmitterMode)
            raise ArgumentParsingError(
                f"cannot parse verbosity level {verbosity_env!r} from environment "
                f"variable SNAPINTERFACES_VERBOSITY_LEVEL (valid values are {values})"
            ) from KeyError

    return verbosity


def get_dispatcher() -> craft_cli.Dispatcher:
    """Return an instance of Dispatcher."""
    return craft_cli.Dispatcher(
        "snapinterfaces",
        COMMAND_GROUPS,
        summary="Generate the security policy of snap interface connections",
        extra_global_args=GLOBAL_ARGS,
    )


def _emit_error(error, cause=None):
    """Emit the error in a centralized way so we can alter it consistently."""
    if cause is not None:
        error.__cause__ = cause

    emit.error(error)


def run() -> int:
    """Run the CLI."""
    emit.init(
        get_verbosity(),
        "snapinterfaces",
        f"Starting snapinterfaces version {__version__}",
    )
    dispatcher = get_dispatcher()
    retcode = 1

    try:
        global_args = dispatcher.pre_parse_args(sys.argv[1:])
        if global_args.get("version"):
            emit.message(f"snapinterfaces {__version__}")
            emit.ended_ok()
            return 0

        if global_args.get("os_release"):
            release_info = get_release_info(
                os_release_file=Path(global_args["os_release"])
            )
        else:
            release_info = get_release_info()

        # Interfaces must be registered before any command runs.
        interfaces.initialize(release_info)

        dispatcher.load_command({"release_info": release_info})
        dispatcher.run()
        emit.ended_ok()
        retcode = 0
    except ArgumentParsingError as err:
        print(err, file=sys.stderr)  # to stderr, as argparse normally does
        emit.ended_ok()
        retcode = 1
    except ProvideHelpException as err:
        print(err, file=sys.stderr)  # to stderr, as argparse normally does
        emit.ended_ok()
        retcode = 0
    except KeyboardInterrupt as err:
        _emit_error(craft_cli.errors.CraftError("Interrupted."), cause=err)
        retcode = 1
    except errors.SnapInterfacesError as err:
        _emit_error(err)
        retcode = 1

    return retcode
