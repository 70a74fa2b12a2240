"""This module contains helper functions that are shared by different modules."""

import sys
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Optional, Union

from colorama import Back, Fore
from colorama.ansi import AnsiBack, AnsiFore

from catalogprep.util.defaults import DEFAULT_CONFIG_LOCATION

if TYPE_CHECKING:  # pragma: no cover
    from catalogprep.util.configuration import Configuration


def color_print_line(
    back: Optional[Union[str, AnsiBack]], fore: Optional[Union[str, AnsiFore]], message: str
):
    """Print string with colors and reset the color afterwards."""
    color = ""
    if back:
        color += back
    if fore:
        color += fore

    print(color + message + Fore.RESET + Back.RESET)


def color_print_title(background: Union[str, AnsiBack], message: str):
    """Print a title line with black font on the given background."""
    message = f"------ {message} ------"
    color_print_line(background, Fore.BLACK, message)


def print_fcolor(fore: AnsiFore, message: str):
    """Print string with colored font and reset the color afterwards."""
    color_print_line(None, fore, message)


def get_package_version() -> str:
    """Return the installed catalogprep version."""
    try:
        return version("catalogprep")
    except PackageNotFoundError:
        return "unknown"


def get_versions_string(config: "Configuration" = None) -> str:
    """
    Returns the python and catalogprep version. If a configuration was found then its version
    is added as well.
    """
    padding = 25
    version_string = f"{'python version:'.ljust(padding)}{sys.version.split()[0]}"
    version_string += f"\n{'catalogprep version:'.ljust(padding)}{get_package_version()}"
    if config:
        config_version = f"{config.version}, {', '.join(config.config_paths) or 'None'}"
    else:
        config_version = f"no configuration found in {DEFAULT_CONFIG_LOCATION}"
    version_string += f"\n{'configuration version:'.ljust(padding)}{config_version}"
    return version_string
