from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from todolist.app import App
from todolist.core.modules.access.models import Identity

# Raw header value; format checks belong to the session validator, not to FastAPI
authorization_header = APIKeyHeader(name="Authorization", scheme_name="BearerAuth", auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def authenticate(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    authorization: Annotated[str | None, Depends(authorization_header)],
) -> Identity:
    """Validate the bearer token and store the resolved identity on the request.

    Install on protected routers via `dependencies=[Depends(authenticate)]`.
    """
    identity = await app.authenticate(authorization)
    request.state.identity = identity
    return identity


def get_identity(request: Request) -> Identity:
    """Get the identity stored by `authenticate` for this request."""
    identity = getattr(request.state, "identity", None)
    if not isinstance(identity, Identity):
        raise RuntimeError("Request identity is missing: route is not protected by the authenticate dependency")
    return identity


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
IdentityDep = Annotated[Identity, Depends(get_identity)]
