"""Plain-text shorten route and locator redirects."""

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from yaus.common.validators import is_valid_locator
from yaus.exceptions import InvalidURLError, LocatorConflictError, StorageUnavailableError

router = APIRouter()


@router.get("/shorten", response_class=PlainTextResponse)
async def shorten(request: Request):
    """Shorten the URL given in the query string.

    The URL is read from the ``url`` parameter, or from the first query
    parameter when ``url`` is absent. Responds 201 with the short URL when it
    was newly created and 200 when it already existed.
    """
    service = request.app.state.service

    params = request.query_params
    if not params:
        return PlainTextResponse("URL missing in query", status_code=status.HTTP_400_BAD_REQUEST)

    long_url = params.get("url")
    if long_url is None:
        long_url = next(iter(params.values()))

    try:
        result = await service.shorten(long_url)
    except InvalidURLError:
        return PlainTextResponse("Malformed URL", status_code=status.HTTP_400_BAD_REQUEST)
    except LocatorConflictError as e:
        return PlainTextResponse(str(e), status_code=status.HTTP_409_CONFLICT)
    except StorageUnavailableError:
        return PlainTextResponse("Storage unavailable", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return PlainTextResponse(
        result.short_url,
        status_code=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
    )


@router.get("/{locator}", include_in_schema=False)
async def redirect_to_url(request: Request, locator: str):
    """Redirect permanently to the long URL stored for a locator."""
    service = request.app.state.service

    is_valid, _ = is_valid_locator(locator)
    long_url = await _resolve(service, locator) if is_valid else None

    if long_url is None:
        return PlainTextResponse("Not found", status_code=status.HTTP_404_NOT_FOUND)

    return RedirectResponse(url=long_url, status_code=status.HTTP_301_MOVED_PERMANENTLY)


async def _resolve(service, locator: str):
    try:
        return await service.resolve(locator)
    except StorageUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
