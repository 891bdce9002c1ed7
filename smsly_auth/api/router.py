from fastapi import APIRouter, Depends

from ..exceptions import DeliveryError, InvalidCredential, StorageError
from ..flow import AuthSessionFlow
from .deps import get_flow, require_subject
from .errors import ApiErrors
from .schemas import LoginIn, LoginOut, ProtectedOut, RegisterIn, RegisterOut

router = APIRouter()


@router.post("/register", response_model=RegisterOut)
async def register(payload: RegisterIn, flow: AuthSessionFlow = Depends(get_flow)) -> RegisterOut:
    try:
        await flow.register(payload.phone_number)
    except StorageError as e:
        raise ApiErrors.register_failed(str(e))
    except DeliveryError as e:
        raise ApiErrors.delivery_failed(str(e))
    return RegisterOut()


@router.post("/login", response_model=LoginOut)
async def login(payload: LoginIn, flow: AuthSessionFlow = Depends(get_flow)) -> LoginOut:
    try:
        token = await flow.login(payload.phone_number, payload.otp)
    except InvalidCredential:
        raise ApiErrors.invalid_otp()
    except StorageError as e:
        raise ApiErrors.login_failed(str(e))
    return LoginOut(token=token.token, token_type=token.token_type, expires_at=token.expires_at)


@router.get("/protected", response_model=ProtectedOut)
async def protected(subject: str = Depends(require_subject)) -> ProtectedOut:
    return ProtectedOut(
        message="Protected route accessed successfully.",
        user={"phone_number": subject},
    )
