"""Path parameter helpers shared by the resource routers."""

from library_api.core.errors import NotFoundError
from library_api.schemas.common import MAX_ID


def parse_id(raw: str, resource: str) -> int:
    """
    Parse a resource id from the URL. Anything that is not a plain run of
    ASCII digits within the id column's range is reported as not found.
    """
    if not (raw.isascii() and raw.isdigit()):
        raise NotFoundError(resource)
    value = int(raw)
    if not 1 <= value <= MAX_ID:
        raise NotFoundError(resource)
    return value
