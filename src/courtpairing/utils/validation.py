"""Validation utilities for Court Pairing.

This module provides reusable validation functions with consistent error handling.
"""

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

from typing import Any, Optional

from courtpairing.constants import (
    MAX_NAME_LENGTH,
    MAX_PLAYERS_PER_SESSION,
    MAX_RATING,
    MIN_NAME_LENGTH,
    MIN_COURTS,
    MIN_PLAYERS_PER_SESSION,
    MIN_RATING,
    PLAYERS_PER_GAME,
    RATING_DECIMAL_PLACES,
)
from courtpairing.exceptions import (
    InsufficientPlayersException,
    InvalidPlayerDataException,
    InvalidResultException,
    RatingValidationException,
)


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
        warning_message: Non-blocking advice for a valid value
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
        warning_message: Optional[str] = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value
        self.warning_message = warning_message

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Rating Validation ==========


def validate_rating(
    rating: Any, min_rating: float = MIN_RATING, max_rating: float = MAX_RATING
) -> ValidationResult:
    """Validate a skill rating.

    Ratings are optional, so None and blank strings are valid and sanitize to None.

    Args:
        rating: Rating value to validate (number or numeric string)
        min_rating: Minimum allowed rating
        max_rating: Maximum allowed rating

    Returns:
        ValidationResult with the rating rounded to two decimals
    """
    if rating is None or (isinstance(rating, str) and not rating.strip()):
        return ValidationResult(is_valid=True, sanitized_value=None)

    if isinstance(rating, bool):
        return ValidationResult(
            is_valid=False, error_message=f"Rating must be a number: {rating}"
        )

    try:
        rating_float = float(rating)
    except (ValueError, TypeError):
        return ValidationResult(
            is_valid=False,
            error_message=f"Rating must be a number: {rating}",
        )

    if rating_float != rating_float or not (min_rating <= rating_float <= max_rating):
        return ValidationResult(
            is_valid=False,
            error_message=f"Rating must be between {min_rating} and {max_rating}: {rating}",
        )

    return ValidationResult(
        is_valid=True, sanitized_value=round(rating_float, RATING_DECIMAL_PLACES)
    )


def validate_rating_strict(
    rating: Any, min_rating: float = MIN_RATING, max_rating: float = MAX_RATING
) -> Optional[float]:
    """Validate rating and return it or raise exception.

    Raises:
        RatingValidationException: If rating is invalid
    """
    result = validate_rating(rating, min_rating, max_rating)
    if not result.is_valid:
        raise RatingValidationException(result.error_message)
    return result.sanitized_value


# ========== Name Validation ==========


def validate_player_name(name: Optional[str]) -> ValidationResult:
    """Validate a player's display name.

    Args:
        name: Name to validate

    Returns:
        ValidationResult with the stripped name
    """
    if not name or not name.strip():
        return ValidationResult(is_valid=False, error_message="Name is required")

    name = name.strip()
    if len(name) < MIN_NAME_LENGTH:
        return ValidationResult(
            is_valid=False,
            error_message=f"Name must be at least {MIN_NAME_LENGTH} characters",
        )
    if len(name) > MAX_NAME_LENGTH:
        return ValidationResult(
            is_valid=False,
            error_message=f"Name must be less than {MAX_NAME_LENGTH} characters",
        )
    return ValidationResult(is_valid=True, sanitized_value=name)


def validate_player_name_strict(name: Optional[str]) -> str:
    """Validate name and return it stripped or raise exception.

    Raises:
        InvalidPlayerDataException: If name is invalid
    """
    result = validate_player_name(name)
    if not result.is_valid:
        raise InvalidPlayerDataException(result.error_message)
    return result.sanitized_value


# ========== Score Validation ==========


def validate_score(points: Any) -> ValidationResult:
    """Validate one side's points in a game (non-negative integer)."""
    if isinstance(points, bool):
        return ValidationResult(
            is_valid=False, error_message=f"Score must be a number: {points}"
        )
    try:
        points_int = int(points)
    except (ValueError, TypeError):
        return ValidationResult(
            is_valid=False,
            error_message=f"Score must be a number: {points}",
        )
    if points_int != points or points_int < 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"Score must be a non-negative whole number: {points}",
        )
    return ValidationResult(is_valid=True, sanitized_value=points_int)


def validate_score_strict(points: Any) -> int:
    """Validate points and return them or raise exception.

    Raises:
        InvalidResultException: If points are invalid
    """
    result = validate_score(points)
    if not result.is_valid:
        raise InvalidResultException(result.error_message)
    return result.sanitized_value


# ========== Session Size Validation ==========


def validate_session_size(player_count: int, court_count: int) -> ValidationResult:
    """Validate that a roster can fill the active courts.

    Args:
        player_count: Number of players in the session
        court_count: Number of active courts

    Returns:
        ValidationResult, with a warning when more players sit out than play
    """
    if player_count < MIN_PLAYERS_PER_SESSION:
        return ValidationResult(
            is_valid=False,
            error_message=f"Minimum {MIN_PLAYERS_PER_SESSION} players required",
        )
    if player_count > MAX_PLAYERS_PER_SESSION:
        return ValidationResult(
            is_valid=False,
            error_message=f"Maximum {MAX_PLAYERS_PER_SESSION} players allowed",
        )

    if court_count < MIN_COURTS:
        return ValidationResult(
            is_valid=False,
            error_message=f"At least {MIN_COURTS} active court required",
        )

    playing = court_count * PLAYERS_PER_GAME
    if player_count < playing:
        return ValidationResult(
            is_valid=False,
            error_message=f"Need at least {playing} players for {court_count} court(s)",
        )

    sitting_out = player_count - playing
    if sitting_out > playing:
        return ValidationResult(
            is_valid=True,
            sanitized_value=player_count,
            warning_message=(
                f"{sitting_out} players will sit out each round (more than playing)"
            ),
        )
    return ValidationResult(is_valid=True, sanitized_value=player_count)


def validate_session_size_strict(player_count: int, court_count: int) -> None:
    """Raise if the roster cannot start a live session.

    Raises:
        InsufficientPlayersException: If the session size is invalid
    """
    result = validate_session_size(player_count, court_count)
    if not result.is_valid:
        raise InsufficientPlayersException(result.error_message)
