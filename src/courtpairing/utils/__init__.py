"""Shared helpers: logging setup, id generation and timestamps."""

# Court Pairing
# Copyright (C) 2025  Court Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

from courtpairing.constants import APP_NAME, DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV_VAR

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def _configure_package_logger() -> None:
    """Attach a single stream handler to the package logger."""
    global _configured
    if _configured:
        return

    package_logger = logging.getLogger(APP_NAME)
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    package_logger.setLevel(level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)

    _configured = True


def setup_logger(name: str) -> logging.Logger:
    """Get a logger that inherits the package handler and level.

    Args:
        name: Module name, usually ``__name__``

    Returns:
        Configured logger
    """
    _configure_package_logger()
    return logging.getLogger(name)


def generate_id(prefix: Optional[str] = None) -> str:
    """Generate a unique identifier, optionally prefixed (``court_1a2b...``)."""
    unique = uuid.uuid4().hex
    if prefix:
        return f"{prefix.lower()}_{unique}"
    return unique


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime to ISO-8601, passing None through."""
    if value is None:
        return None
    return value.isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string written by :func:`format_timestamp`."""
    if not value:
        return None
    return date_parser.isoparse(value)
