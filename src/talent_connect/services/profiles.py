# src/talent_connect/services/profiles.py
"""Helpers for the profile directory."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from talent_connect.core.errors import NotFoundError
from talent_connect.core.security import TokenClaims
from talent_connect.models import Profile
from talent_connect.schemas.profile import ProfileUpdate
from talent_connect.utils.text import clean_text, strip_tags

__all__ = [
    "get_profile",
    "get_or_provision",
    "update_profile",
]

logger = logging.getLogger(__name__)


def get_profile(db: Session, profile_id: str) -> Profile:
    """Return a profile by id or raise ``NotFoundError``."""
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


def get_or_provision(db: Session, claims: TokenClaims) -> Profile:
    """Return the caller's profile, creating it from token claims on first sight."""
    profile = db.get(Profile, claims.subject)
    if profile is not None:
        return profile

    profile = Profile(
        id=claims.subject,
        email=claims.email,
        full_name=strip_tags(claims.full_name).strip() or None,
    )
    try:
        with db.begin_nested():
            db.add(profile)
            db.flush()
    except IntegrityError:
        # Provisioned concurrently by another request.
        existing = db.get(Profile, claims.subject)
        if existing is None:
            raise
        return existing

    db.commit()
    db.refresh(profile)
    logger.info("Provisioned profile %s", profile.id)
    return profile


def update_profile(db: Session, profile: Profile, update_data: ProfileUpdate) -> Profile:
    """Apply partial updates to the caller's own profile."""
    update_dict = update_data.model_dump(exclude_unset=True)

    skills = update_dict.pop("skills", None)
    if "skills" in update_data.model_fields_set:
        tags = [strip_tags(skill).strip() for skill in skills or []]
        profile.skills = ",".join(tag for tag in tags if tag) or None

    for key, value in update_dict.items():
        if isinstance(value, str) and key != "role":
            value = clean_text(value, field=key, required=False) or None
        setattr(profile, key, value)

    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile
