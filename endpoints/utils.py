# endpoints/utils.py
from typing import Optional

from dependency_injector.wiring import inject, Provide
from fastapi import Depends, HTTPException, Request

from containers import Container
from services.identity import IdentityProvider


@inject
def get_current_user_id_from_request(
    request: Request,
    identity: IdentityProvider = Depends(Provide[Container.identity]),
) -> Optional[str]:
    """
    User id of the caller, or None when not signed in.
    """
    return identity.authenticate(request)


def require_user_id(user_id: Optional[str] = Depends(get_current_user_id_from_request)) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
