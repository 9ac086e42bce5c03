from fastapi import Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from firebase_admin import _apps, auth, credentials, initialize_app

from app.core.config import config
from app.core.logging import get_logger

logger = get_logger(__name__)

firebase_app = None


def init_firebase():
    global firebase_app
    if not _apps and not config.is_testing:
        cred = credentials.Certificate(config.firebase_credentials)
        firebase_app = initialize_app(cred)


async def authenticate_request(request: Request, call_next):
    # anonymous by default, public routes decide on their own
    request.state.user = None

    auth_header = request.headers.get("Authorization")
    if not auth_header or config.is_testing:
        return await call_next(request)

    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid or missing authentication token"},
        )

    try:
        # the SDK fetches signing certificates over blocking http
        request.state.user = await run_in_threadpool(
            auth.verify_id_token, token, firebase_app
        )
    except auth.CertificateFetchError as e:
        logger.error("Could not fetch token signing certificates: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Authentication service unavailable"},
        )
    except (
        ValueError,
        auth.InvalidIdTokenError,
        auth.ExpiredIdTokenError,
        auth.UserDisabledError,
    ) as e:
        logger.info("Rejected bearer token: %s", e)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid or missing authentication token"},
        )

    return await call_next(request)
