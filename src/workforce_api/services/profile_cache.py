"""Request-scoped employee profile cache."""

from uuid import UUID

from workforce_api.models.dto.status import ProfileResponse


class ProfileCache:
    """Profiles already built during one request, keyed by employee id.

    A fresh instance is created per request by ``get_profile_cache``; it is
    never shared between requests. Writes issued through the services that
    receive the cache invalidate the affected employee, and ``clear()``
    forces every profile to be rebuilt.
    """

    def __init__(self) -> None:
        self._profiles: dict[UUID, ProfileResponse] = {}

    def get(self, employee_id: UUID) -> ProfileResponse | None:
        return self._profiles.get(employee_id)

    def put(self, employee_id: UUID, profile: ProfileResponse) -> None:
        self._profiles[employee_id] = profile

    def invalidate(self, employee_id: UUID) -> None:
        self._profiles.pop(employee_id, None)

    def clear(self) -> None:
        self._profiles.clear()

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)
