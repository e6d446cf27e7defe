"""Build the per-request IdentityContext from gateway headers or a bearer credential."""

import logging
from collections.abc import Callable, Mapping

from users_api.schemas.identity import ANONYMOUS, IdentityContext, parse_user_id

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"
USER_EMAIL_HEADER = "X-User-Email"
USER_ROLE_HEADER = "X-User-Role"
USER_NAME_HEADER = "X-User-Name"


def identity_from_headers(headers: Mapping[str, str]) -> IdentityContext | None:
    """
    Identity propagated by the gateway, which already validated the caller's JWT.

    No signature check happens here. Returns None unless X-User-Id is a storable user id.
    """
    raw_id = headers.get(USER_ID_HEADER)
    if not raw_id:
        return None
    user_id = parse_user_id(raw_id)
    if user_id is None:
        return None
    return IdentityContext(
        user_id=user_id,
        email=headers.get(USER_EMAIL_HEADER) or "",
        role=headers.get(USER_ROLE_HEADER) or "",
        user_name=headers.get(USER_NAME_HEADER) or "",
        source="gateway",
    )


def build_identity(
    headers: Mapping[str, str],
    verify_credential: Callable[[], IdentityContext] | None = None,
) -> IdentityContext:
    """
    Gateway headers first; otherwise the locally verified bearer credential, if any.

    Never raises: extraction errors are logged and the caller is treated as anonymous.
    Rejecting unauthenticated callers is left to the route guards.
    """
    try:
        identity = identity_from_headers(headers)
        if identity is not None:
            logger.debug(
                "Identity from gateway headers",
                extra={"user_id": identity.user_id, "role": identity.role},
            )
            return identity
        if verify_credential is not None:
            identity = verify_credential()
            if identity.is_authenticated:
                logger.debug(
                    "Identity from bearer credential",
                    extra={"user_id": identity.user_id, "identity_source": identity.source},
                )
                return identity
    except Exception:
        logger.exception("Error extracting user identity; continuing as anonymous")
    return ANONYMOUS
