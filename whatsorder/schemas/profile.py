from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from whatsorder.store.records import ProfileRecord


class ProfileOut(BaseModel):
    owner_id: str
    onboarding_completed: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def profile_to_dict(profile: ProfileRecord) -> dict:
    return {
        "owner_id": profile.owner_id,
        "onboarding_completed": profile.onboarding_completed,
        "created_at": profile.created_at.isoformat() if profile.created_at else None,
        "updated_at": profile.updated_at.isoformat() if profile.updated_at else None,
    }
