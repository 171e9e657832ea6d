# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Logging setup for the command line tool.
"""
import logging
import sys
from typing import Union

_FORMAT = "[%(levelname).4s] %(name)s: %(message)s"

_LEVEL_NAMES = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def verbosity_to_level(verbosity: Union[str, int, None]) -> int:
    """
    Maps a BUILD_LOGLEVEL style verbosity to a logging level.

    Numeric values follow the build-worker convention: 0 is quiet, 1-2 are
    informational and 3 or higher turns on debug output. Level names such as
    'debug' are accepted as well. Anything else maps to INFO.

    :param verbosity: The verbosity value, usually read from a container's environment.
    :return: A logging level.
    """
    if verbosity is None or verbosity == "":
        return logging.INFO
    if isinstance(verbosity, str):
        text = verbosity.strip().lower()
        if text in _LEVEL_NAMES:
            return _LEVEL_NAMES[text]
        try:
            verbosity = int(text)
        except ValueError:
            return logging.INFO
    if verbosity <= 0:
        return logging.WARNING
    if verbosity < 3:
        return logging.INFO
    return logging.DEBUG


def setup_logger(verbosity: Union[str, int, None] = None) -> None:
    """
    Configures the root logger to write to stderr.

    Calling it again only adjusts the level.

    :param verbosity: See verbosity_to_level.
    """
    logger = logging.getLogger()
    logger.setLevel(verbosity_to_level(verbosity))

    # Prevent duplicate handlers if this function is called multiple times
    if logger.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
