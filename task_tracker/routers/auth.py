from fastapi import APIRouter, Response, status

from task_tracker.dependencies import AuthServiceDep
from task_tracker.models import AccessToken, AuthCredentials
from task_tracker.validation import unwrap, validate_credentials

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_class=Response)
async def sign_up(credentials: AuthCredentials, service: AuthServiceDep):
    """Register a new user"""
    credentials = unwrap(validate_credentials(credentials.username, credentials.password))
    await service.sign_up(credentials)
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/signin", response_model=AccessToken)
async def sign_in(credentials: AuthCredentials, service: AuthServiceDep):
    """Exchange username and password for a bearer token"""
    token = await service.sign_in(credentials)
    return AccessToken(access_token=token)
