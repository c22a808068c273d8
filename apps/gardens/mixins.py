from rest_framework.exceptions import ValidationError

from apps.gardens.models import Garden
from apps.gardens.services import (
    extract_garden_id,
    get_existing_garden,
    get_viewable_garden,
)


class GardenContextMixin:
    """
    Resolve a garden from request (kwargs, query params, or body).

    Gardens the caller cannot see resolve to 404 so their existence is not leaked.
    """

    garden_param = "garden_id"
    _garden_cache = None

    def get_garden_id(self) -> int:
        if hasattr(self, "kwargs") and self.kwargs.get(self.garden_param):
            try:
                return int(self.kwargs[self.garden_param])
            except (TypeError, ValueError) as exc:
                raise ValidationError({"garden_id": "Invalid garden_id"}) from exc
        return extract_garden_id(self.request)

    def get_garden(self) -> Garden:
        if self._garden_cache is None:
            self._garden_cache = get_viewable_garden(self.get_garden_id(), self.request.user)
            setattr(self.request, "garden", self._garden_cache)
        return self._garden_cache

    def get_garden_for_write(self) -> Garden:
        """Write paths report missing capabilities as 403, so only absence is a 404 here."""
        if self._garden_cache is None:
            self._garden_cache = get_existing_garden(self.get_garden_id())
            setattr(self.request, "garden", self._garden_cache)
        return self._garden_cache
