"""
Name: Bootstrap Administrator
Description: Create the configured administrator on startup when absent.
"""

from uuid import uuid4

from ..config import Settings
from ..domain.entities import Administrator, Role
from ..domain.repositories import IdentityRepository
from ..exceptions import DuplicateIdentityError
from ..logger import logger
from ..passwords import hash_password


def ensure_bootstrap_admin(settings: Settings, repository: IdentityRepository) -> bool:
    """
    R: Ensure BOOTSTRAP_ADMIN_USERNAME exists.

    Returns:
        True when an administrator was created
    """
    username = settings.bootstrap_admin_username.strip()
    if not username:
        return False
    if repository.role != Role.ADMIN:
        raise ValueError("Bootstrap requires the administrator repository")

    if repository.get_by_username(username) is not None:
        logger.info("Bootstrap admin already exists (skipping)", extra={"username": username})
        return False

    try:
        repository.create(
            Administrator(
                id=uuid4(),
                username=username,
                password_hash=hash_password(settings.bootstrap_admin_password),
            )
        )
    except DuplicateIdentityError:
        # R: Another worker created it first
        logger.info("Bootstrap admin created concurrently", extra={"username": username})
        return False

    logger.info("Bootstrap admin created", extra={"username": username})
    return True
