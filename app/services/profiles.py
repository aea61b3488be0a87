"""Profile existence, visibility and athlete administration."""

import logging
from datetime import datetime
from enum import Enum

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models import Profile
from app.constants import UserRole, CoachLevel
from .errors import Conflict, NotFound, PermissionDenied
from .storage import commit

logger = logging.getLogger(__name__)


# ================================
# Profile existence
# ================================

def profile_exists(user_id) -> bool:
    """Id-only lookup. A failing lookup counts as "no profile"."""
    if not user_id:
        return False
    try:
        row = db.session.execute(select(Profile.id).where(Profile.id == user_id)).first()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Profile existence check failed for %s", user_id)
        return False
    return row is not None


def get_profile(user_id):
    if not user_id:
        return None
    return db.session.get(Profile, user_id)


# ================================
# Visibility
# ================================

class VisibilityTier(str, Enum):
    all = "all"
    principal = "principal"
    junior = "junior"
    own = "own"


_UNRECOGNIZED = object()


def _parse(enum_cls, value):
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return _UNRECOGNIZED


def visibility_tier(requester) -> VisibilityTier:
    """Map a requester's (role, coach_level) to the profiles they may list."""
    if requester is None:
        return VisibilityTier.own

    role = _parse(UserRole, requester.role)
    level = _parse(CoachLevel, requester.coach_level)

    if role is UserRole.coach:
        if level is CoachLevel.super_admin:
            return VisibilityTier.all
        if level is CoachLevel.principal:
            return VisibilityTier.principal
        if level is CoachLevel.junior:
            return VisibilityTier.junior
        if level is None:
            return VisibilityTier.own
    elif role is UserRole.athlete and level is None:
        return VisibilityTier.own

    logger.warning(
        "Unrecognized role/level combination for profile %s: %r/%r",
        requester.id, requester.role, requester.coach_level,
    )
    return VisibilityTier.own


def resolve_visible_profiles(requester, profiles):
    """Filter ``profiles`` down to those ``requester`` may see."""
    tier = visibility_tier(requester)

    if tier is VisibilityTier.all:
        return list(profiles)
    if tier is VisibilityTier.principal:
        return [
            p for p in profiles
            if p.role == UserRole.athlete.value
            or (
                p.role == UserRole.coach.value
                and p.coach_level == CoachLevel.junior.value
                and p.managed_by == requester.id
            )
        ]
    if tier is VisibilityTier.junior:
        return [p for p in profiles if p.role == UserRole.athlete.value]

    requester_id = getattr(requester, "id", None)
    return [p for p in profiles if requester_id is not None and p.id == requester_id]


def get_visible_profiles(requester_id):
    try:
        requester = db.session.get(Profile, requester_id)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Requester lookup failed for %s, falling back to own profile", requester_id)
        own = _safe_own_profile(requester_id)
        return [own] if own else []

    if requester is None:
        return []

    tier = visibility_tier(requester)
    if tier is VisibilityTier.own:
        return [requester]

    profiles = Profile.query.order_by(Profile.created_at.desc()).all()
    return resolve_visible_profiles(requester, profiles)


def _safe_own_profile(requester_id):
    try:
        return db.session.get(Profile, requester_id)
    except SQLAlchemyError:
        db.session.rollback()
        return None


def can_read_profile(profile, requester) -> bool:
    """A profile is readable by its owner and by whoever would see it listed."""
    if requester is None:
        return False
    if profile.id == requester.id:
        return True
    return bool(resolve_visible_profiles(requester, [profile]))


def get_readable_profile(profile_id, requester):
    profile = db.session.get(Profile, profile_id)
    if profile is None:
        raise NotFound("Profile not found")
    if not can_read_profile(profile, requester):
        raise PermissionDenied()
    return profile


def get_visible_athletes(requester):
    """Athletes listed on the athletes page, pending ones included for coaches."""
    if requester is None:
        return []
    if requester.is_athlete:
        return [requester]
    athletes = (
        Profile.query
        .filter_by(role=UserRole.athlete.value)
        .order_by(Profile.name)
        .all()
    )
    return resolve_visible_profiles(requester, athletes)


# ================================
# Profile setup & athlete administration
# ================================

def create_own_profile(account, data):
    """Create the caller's profile. New profiles are inactive athletes."""
    if profile_exists(account.id):
        raise Conflict("Profile already exists")

    profile = Profile(
        id=account.id,
        email=account.email,
        name=data["name"],
        role=UserRole.athlete.value,
        coach_level=None,
        active=False,
        category=data.get("category"),
        grade=data.get("grade"),
        weight=data.get("weight"),
        height=data.get("height"),
    )
    db.session.add(profile)
    commit("Profile creation failed")
    logger.info("Profile created for %s, pending validation", account.id)
    return profile


def _get_athlete(athlete_id):
    athlete = Profile.query.filter_by(id=athlete_id, role=UserRole.athlete.value).first()
    if athlete is None:
        raise NotFound("Athlete not found")
    return athlete


def approve_athlete(athlete_id, coach):
    athlete = _get_athlete(athlete_id)
    athlete.active = True
    athlete.updated_at = datetime.utcnow()
    commit("Athlete validation failed")
    logger.info("Athlete %s validated by %s", athlete_id, coach.id)
    return athlete


def reject_athlete(athlete_id, coach):
    athlete = _get_athlete(athlete_id)
    db.session.delete(athlete)
    commit("Athlete rejection failed")
    logger.info("Athlete %s rejected by %s", athlete_id, coach.id)


def update_athlete(athlete_id, data, requester):
    if requester is None or not requester.is_coach:
        raise PermissionDenied()

    athlete = _get_athlete(athlete_id)

    email = data.get("email")
    if email and email != athlete.email:
        taken = Profile.query.filter(Profile.email == email, Profile.id != athlete.id).first()
        if taken:
            raise Conflict("This email address is already in use")

    for key in ("name", "email", "category", "grade", "weight", "height", "active"):
        if key in data:
            setattr(athlete, key, data[key])
    athlete.updated_at = datetime.utcnow()
    commit("Athlete update failed")
    return athlete


def toggle_athlete_status(athlete_id, requester):
    if requester is None or not requester.is_coach:
        raise PermissionDenied()
    athlete = _get_athlete(athlete_id)
    athlete.active = not athlete.active
    athlete.updated_at = datetime.utcnow()
    commit("Athlete status change failed")
    return athlete


def promote_to_coach(athlete_id, level, promoter):
    """Turn an athlete into a coach of ``level`` managed by ``promoter``."""
    if promoter is None or not promoter.is_coach:
        raise PermissionDenied("Only coaches can promote")

    is_super = promoter.coach_level == CoachLevel.super_admin.value
    if level == CoachLevel.principal.value and not is_super:
        raise PermissionDenied("Insufficient permissions to create a principal coach")
    if level == CoachLevel.junior.value and not (is_super or promoter.coach_level == CoachLevel.principal.value):
        raise PermissionDenied("Insufficient permissions to create a junior coach")

    athlete = _get_athlete(athlete_id)
    athlete.role = UserRole.coach.value
    athlete.coach_level = level
    athlete.managed_by = promoter.id
    athlete.active = True
    athlete.category = None
    athlete.grade = None
    athlete.updated_at = datetime.utcnow()
    commit("Coach promotion failed")
    logger.info("Profile %s promoted to %s coach by %s", athlete_id, level, promoter.id)
    return athlete


def profile_stats(requester):
    if requester is None or not requester.is_coach:
        raise PermissionDenied()

    profiles = Profile.query.with_entities(
        Profile.role, Profile.active, Profile.category, Profile.coach_level
    ).all()

    athletes = [p for p in profiles if p.role == UserRole.athlete.value]
    coaches = [p for p in profiles if p.role == UserRole.coach.value]

    by_category = {}
    for p in athletes:
        if p.category:
            by_category[p.category] = by_category.get(p.category, 0) + 1

    return {
        "athletes": {
            "total": len(athletes),
            "active": len([p for p in athletes if p.active]),
            "byCategory": by_category,
        },
        "coaches": {
            "total": len(coaches),
            "byLevel": {
                "super_admin": len([p for p in coaches if p.coach_level == CoachLevel.super_admin.value]),
                "principal": len([p for p in coaches if p.coach_level == CoachLevel.principal.value]),
                "junior": len([p for p in coaches if p.coach_level == CoachLevel.junior.value]),
                "normal": len([p for p in coaches if not p.coach_level]),
            },
        },
    }

