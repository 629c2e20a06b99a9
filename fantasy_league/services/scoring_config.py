import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from fantasy_league.core.exceptions import ActiveProfileError, ProfileNotFoundError
from fantasy_league.db.models.app_state import SCORING_CONFIG
from fantasy_league.schemas.scoring import (
    DEFAULT_POINTS_SYSTEM,
    PointsSystem,
    ScoringProfile,
    ScoringSettingsDoc,
)
from fantasy_league.services.store import get_document, set_document

logger = logging.getLogger(__name__)


def active_points_system(raw_settings: dict | None) -> PointsSystem:
    """
    Resolves the active points table from the raw `scoring_config` document.
    Never raises: a missing or malformed document falls back to the default.
    """
    if not raw_settings:
        return DEFAULT_POINTS_SYSTEM

    try:
        if "profiles" in raw_settings:
            settings = ScoringSettingsDoc.model_validate(raw_settings)
            active = settings.active_profile()
            if active:
                return active.config
            logger.warning(
                "Active scoring profile %r not found, using the default table",
                settings.active_profile_id,
            )
            return DEFAULT_POINTS_SYSTEM

        # Legacy document: the points table stored directly
        if "grandPrixFinish" not in raw_settings and "grand_prix_finish" not in raw_settings:
            logger.warning("Scoring configuration has no points table, using the default table")
            return DEFAULT_POINTS_SYSTEM
        return PointsSystem.model_validate(raw_settings)
    except ValidationError as e:
        logger.warning("Malformed scoring configuration, using the default table: %s", e)
        return DEFAULT_POINTS_SYSTEM


def load_settings(db: Session) -> ScoringSettingsDoc:
    """Settings in profile form; a legacy or empty document becomes one default profile."""
    raw = get_document(db, SCORING_CONFIG)
    if raw and "profiles" in raw:
        try:
            return ScoringSettingsDoc.model_validate(raw)
        except ValidationError as e:
            logger.warning("Malformed scoring settings document: %s", e)

    return ScoringSettingsDoc(
        profiles=[ScoringProfile(id="default", name="Default", config=active_points_system(raw))],
        active_profile_id="default",
    )


def _save_settings(db: Session, settings: ScoringSettingsDoc) -> None:
    set_document(db, SCORING_CONFIG, settings.model_dump(by_alias=True))
    db.commit()


def save_profile(db: Session, profile: ScoringProfile) -> ScoringSettingsDoc:
    """Inserts or replaces a profile by id."""
    settings = load_settings(db)

    existing = settings.get_profile(profile.id)
    if existing:
        settings.profiles[settings.profiles.index(existing)] = profile
    else:
        settings.profiles.append(profile)

    if settings.active_profile() is None:
        settings.active_profile_id = profile.id

    _save_settings(db, settings)
    return settings


def activate_profile(db: Session, profile_id: str) -> ScoringSettingsDoc:
    settings = load_settings(db)
    if not settings.get_profile(profile_id):
        raise ProfileNotFoundError(f"Scoring profile {profile_id!r} not found")

    settings.active_profile_id = profile_id
    _save_settings(db, settings)
    return settings


def delete_profile(db: Session, profile_id: str) -> ScoringSettingsDoc:
    settings = load_settings(db)
    profile = settings.get_profile(profile_id)

    if not profile:
        raise ProfileNotFoundError(f"Scoring profile {profile_id!r} not found")
    if profile_id == settings.active_profile_id:
        raise ActiveProfileError("The active scoring profile cannot be deleted")

    settings.profiles.remove(profile)
    _save_settings(db, settings)
    return settings
