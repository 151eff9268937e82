"""Exceptions for use in Court Pairing"""

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


# ========== Base Application Exception ==========


class CourtPairingException(Exception):
    """Base exception for all Court Pairing errors.

    Every failure in the engine is synchronous and leaves the prior session
    state intact, so catching this class is always safe.
    """

    pass


# ========== Validation Exceptions ==========


class ValidationException(CourtPairingException):
    """Base exception for invalid input or configuration."""

    pass


class InsufficientPlayersException(ValidationException):
    """Raised when too few players are available for a session or round."""

    pass


class RatingValidationException(ValidationException):
    """Raised when a rating value is invalid."""

    pass


class InvalidPlayerDataException(ValidationException):
    """Raised when player data is invalid or incomplete."""

    pass


class InvalidPartnershipException(ValidationException):
    """Raised when a fixed partnership cannot be configured."""

    pass


class InvalidSwapException(ValidationException):
    """Raised when a player swap would break a round."""

    pass


class InvalidResultException(ValidationException):
    """Raised when a game result is invalid (e.g., negative score)."""

    pass


# ========== Pairing Exceptions ==========


class PairingException(CourtPairingException):
    """Base exception for round assignment errors."""

    pass


class GenerationEmptyException(PairingException):
    """Raised when round generation produced no games."""

    pass


# ========== Session Exceptions ==========


class SessionException(CourtPairingException):
    """Base exception for session-related errors."""

    pass


class IllegalStateTransitionException(SessionException):
    """Raised when a session or round is in the wrong state for an operation."""

    pass


class DuplicatePlayerException(SessionException):
    """Raised when attempting to add a player that already exists."""

    pass


class DuplicateCourtException(SessionException):
    """Raised when attempting to add a court that already exists."""

    pass


# ========== Lookup Exceptions ==========


class NotFoundException(CourtPairingException):
    """Base exception for unknown ids."""

    pass


class SessionNotFoundException(NotFoundException):
    """Raised when a requested session does not exist."""

    pass


class PlayerNotFoundException(NotFoundException):
    """Raised when a requested player cannot be found."""

    pass


class CourtNotFoundException(NotFoundException):
    """Raised when a requested court cannot be found."""

    pass


class RoundNotFoundException(NotFoundException):
    """Raised when a requested round does not exist."""

    pass
