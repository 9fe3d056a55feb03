"""Organization profiles: named caption template sets, stored locally only."""

from __future__ import annotations

from ..core.captions import PLATFORMS
from ..core.errors import NotFound, UnknownPlatform, ValidationError
from ..core.models import OrganizationProfile
from ..core.storage import JSONStorage


class ProfileStore:
    def __init__(self, storage: JSONStorage) -> None:
        self.storage = storage
        self._profiles: dict[str, OrganizationProfile] = {
            p.id: p for p in storage.load_organizations()
        }

    def _save(self, profiles: dict[str, OrganizationProfile]) -> None:
        self.storage.save_organizations(profiles.values())
        self._profiles = profiles

    def list(self) -> list[OrganizationProfile]:
        return list(self._profiles.values())

    def get(self, profile_id: str) -> OrganizationProfile:
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise NotFound("Organization not found.")
        return profile

    def find_by_name(self, name: str) -> OrganizationProfile | None:
        wanted = name.strip().lower()
        return next(
            (p for p in self._profiles.values() if p.name.lower() == wanted), None
        )

    def add(self, name: str) -> OrganizationProfile:
        if not name.strip():
            raise ValidationError("Please enter an organization name.")
        profile = OrganizationProfile(name=name.strip())
        self._save({**self._profiles, profile.id: profile})
        return profile

    def set_template(self, profile_id: str, platform_key: str, text: str) -> OrganizationProfile:
        """Override one platform template; blank ``text`` restores the default."""
        if platform_key not in PLATFORMS:
            raise UnknownPlatform(f"Unknown platform `{platform_key}`.")
        profile = self.get(profile_id)
        templates = dict(profile.templates)
        if text.strip():
            templates[platform_key] = text
        else:
            templates.pop(platform_key, None)
        updated = profile.model_copy(update={"templates": templates})
        self._save({**self._profiles, profile_id: updated})
        return updated

    def delete(self, profile_id: str) -> None:
        if profile_id not in self._profiles:
            return
        self._save({k: v for k, v in self._profiles.items() if k != profile_id})
