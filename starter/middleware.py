from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class InstallGuardMiddleware(BaseHTTPMiddleware):
    """Refuse requests until `starter install` has generated APP_KEY."""

    # Paths that never require an installed app
    PUBLIC_PATHS = {"/api/ping"}

    def __init__(self, app, get_settings_fn):
        super().__init__(app)
        self._get_settings = get_settings_fn

    async def dispatch(self, request: Request, call_next) -> Response:
        settings = self._get_settings()

        if settings.is_installed:
            return await call_next(request)

        if request.url.path in self.PUBLIC_PATHS:
            return await call_next(request)

        return Response(
            status_code=503,
            content="Application is not installed. Run `starter install` first.",
        )
