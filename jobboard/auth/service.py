"""
Account service: signup, login and logout
Passwords are stored as bcrypt hashes; accounts are looked up by username
"""

from typing import Optional

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jobboard.db import db
from jobboard.exceptions import InvalidCredentials, PersistenceError, UsernameTaken, ValidationError
from jobboard.models import Account, Section
from jobboard.simple_logger import get_logger

logger = get_logger("auth")

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72


def find_account(username) -> Optional[Account]:
    if not username:
        return None
    return Account.query.filter_by(username=username).first()


def hash_password(raw_password: str, rounds: Optional[int] = None) -> str:
    if rounds is None:
        rounds = current_app.config.get('BCRYPT_ROUNDS', 12)
    return bcrypt.hashpw(raw_password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def check_password(raw_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(raw_password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed stored hash or over-long input
        return False


def signup(username: str, raw_password: str, section) -> Account:
    """Create an account; section is parsed case-insensitively ('Post' / 'Apply')"""
    parsed_section = section if isinstance(section, Section) else Section.parse(section)

    if len(raw_password.encode('utf-8')) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes.")

    if find_account(username) is not None:
        logger.info(f"[AUTH] Signup rejected, username taken: {username}")
        raise UsernameTaken("Username already exists.", details={'username': username})

    account = Account(
        username=username,
        password_hash=hash_password(raw_password),
        section=parsed_section,
    )
    try:
        db.session.add(account)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.info(f"[AUTH] Signup lost uniqueness race for username: {username}")
        raise UsernameTaken("Username already exists.", details={'username': username})
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"[AUTH] Failed to persist account {username}: {e}")
        raise PersistenceError("Failed to create account.")

    logger.info(f"[AUTH] Account created: {username} ({parsed_section.value})")
    return account


def login(username: str, raw_password: str) -> Account:
    account = find_account(username)
    if account is None or not check_password(raw_password, account.password_hash):
        logger.info(f"[AUTH] Login failed for username: {username}")
        raise InvalidCredentials("Invalid username or password.")
    logger.info(f"[AUTH] Login succeeded for username: {username}")
    return account


def logout(username: str) -> bool:
    """Tokens are not tracked server-side, so there is nothing to invalidate"""
    logger.info(f"[AUTH] User {username} has logged out")
    return True
