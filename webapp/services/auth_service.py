"""
Authentication Service

Handles user registration and credential checks guarded by a failed-attempt lockout.
"""

import re
import logging
from datetime import datetime, timedelta
from enum import Enum
from sqlalchemy import select
from werkzeug.security import generate_password_hash, check_password_hash

from config import database
from config.models import User
from config.settings import MAX_FAILED_ATTEMPTS, LOCKOUT_SECONDS
from utils.errors import ValidationError, LockedError, PersistenceError
from utils.locks import user_locks

logger = logging.getLogger(__name__)

# At least one lowercase letter, one uppercase letter and one digit
PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).+$")


class LoginResult(str, Enum):
    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"
    LOCKED = "locked"


class RegistrationResult(str, Enum):
    SUCCESS = "success"
    USERNAME_TAKEN = "username_taken"
    WEAK_PASSWORD = "weak_password"


def validate_password(password):
    """
    Raises:
        ValidationError: If the password lacks an uppercase letter, a lowercase letter or a digit
    """
    if not password or not PASSWORD_RULE.match(password):
        raise ValidationError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number."
        )


def register_user(username, password):
    """
    Register a new account.

    Args:
        username (str): Desired username
        password (str): Plain-text password, stored only as a one-way hash

    Returns:
        RegistrationResult: Outcome of the registration
    """
    username = (username or '').strip()
    if not username:
        raise ValidationError("Username is required")

    if database.user_exists(username):
        logger.info(f"Username already taken: {username}")
        return RegistrationResult.USERNAME_TAKEN

    try:
        validate_password(password)
    except ValidationError as e:
        logger.info(f"Rejected registration for {username}: {e}")
        return RegistrationResult.WEAK_PASSWORD

    user_id = database.create_user(username, generate_password_hash(password))
    if user_id is None:
        # Lost a race with another signup for the same name
        if database.user_exists(username):
            return RegistrationResult.USERNAME_TAKEN
        raise PersistenceError("Error registering user")

    logger.info(f"User registered successfully: {username}")
    return RegistrationResult.SUCCESS


class LoginAttemptTracker:
    """
    Failed-attempt counter and lock window for each account.

    An account is Active until `max_attempts` consecutive failures, then Locked
    until `locked_until`. Attempts made while locked are rejected without
    touching the counter, so an attacker cannot extend the lock. Once the window
    has passed the account is Active again with a fresh counter.

    Each attempt reads and writes the user's row inside one transaction while
    holding that user's lock, so concurrent attempts cannot lose updates.
    """

    def __init__(self, max_attempts=MAX_FAILED_ATTEMPTS, lockout_seconds=LOCKOUT_SECONDS, clock=datetime.now):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.lockout = timedelta(seconds=lockout_seconds)
        self.clock = clock

    def _release_expired_lock(self, user, now):
        if user.locked_until is None:
            return
        if now < user.locked_until:
            raise LockedError("Account temporarily locked. Please try again shortly.", locked_until=user.locked_until)
        logger.info(f"Lock expired for {user.username}")
        user.locked_until = None
        user.failed_attempts = 0

    def attempt(self, username, verify):
        """
        Run one credential check through the state machine.

        Args:
            username (str): Account name
            verify (callable): Receives the stored password hash, returns True on a match

        Returns:
            LoginResult: SUCCESS or INVALID_CREDENTIALS

        Raises:
            LockedError: If the account is inside its lock window
            PersistenceError: If the account state could not be stored
        """
        with user_locks.hold(username):
            session = database.get_db_session()
            try:
                user = session.execute(
                    select(User).where(User.username == username).with_for_update()
                ).scalar_one_or_none()
                if user is None:
                    return LoginResult.INVALID_CREDENTIALS

                now = self.clock()
                self._release_expired_lock(user, now)

                if verify(user.password_hash):
                    user.failed_attempts = 0
                    result = LoginResult.SUCCESS
                else:
                    user.failed_attempts = (user.failed_attempts or 0) + 1
                    if user.failed_attempts >= self.max_attempts:
                        user.locked_until = now + self.lockout
                        logger.warning(
                            f"Locking {username} until {user.locked_until} after {user.failed_attempts} failed attempts"
                        )
                    result = LoginResult.INVALID_CREDENTIALS

                session.commit()
                return result
            except LockedError:
                session.rollback()
                raise
            except Exception as e:
                logger.error(f"Error recording login attempt for {username}: {e}")
                session.rollback()
                raise PersistenceError("Could not record login attempt") from e
            finally:
                session.close()


default_tracker = LoginAttemptTracker()


def login(username, password, tracker=None):
    """
    Check a username/password pair.

    Returns:
        LoginResult: SUCCESS, INVALID_CREDENTIALS or LOCKED
    """
    tracker = tracker or default_tracker
    try:
        return tracker.attempt(username, lambda stored: check_password_hash(stored, password or ''))
    except LockedError:
        logger.warning(f"Rejected login for locked account {username}")
        return LoginResult.LOCKED


def delete_user(username):
    deleted = database.delete_user(username)
    if deleted:
        logger.info(f"User deleted successfully: {username}")
    else:
        logger.warning(f"User not found for deletion: {username}")
    return deleted
