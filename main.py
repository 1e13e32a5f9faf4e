import logging
from contextlib import asynccontextmanager
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from auth import TokenPayload, create_access_token, require_account_owner
from config import CORS_ORIGINS
from database import init_db
from models import (
    CheckoutItem,
    ContactRequest,
    CustomerInfoRequest,
    DiscountRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProductRequest,
    ResetPasswordRequest,
    ResetTokenStatus,
    SendOTPRequest,
    VerifyOTPRequest,
)
from services import account_service, store_service
from services.cleanup_service import create_scheduler, run_cleanup_job
from services.errors import StorefrontError, ValidationError
from services.logs_service import logger
from storemodel.store_model import Contact, Discount, Product

http_logger = logging.getLogger("storefront_api.http")

scheduler = create_scheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up... Initializing database.")
    init_db()
    run_cleanup_job()  # Initial cleanup on startup
    scheduler.start()
    logger.info("Expired account cleanup scheduled.")
    yield
    scheduler.shutdown(wait=False)
    logger.info("Expired account cleanup stopped.")


app = FastAPI(
    title="Storefront API",
    description="API for storefront accounts, catalog, discounts, contacts and checkout",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail, "alert": False, "error": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    fields = [".".join(str(part) for part in err["loc"] if part != "body") for err in errors]
    message = errors[0]["msg"] if errors else ValidationError.message
    http_logger.info(
        f"Rejected {request.method} {request.url.path}: {fields}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": message,
            "alert": False,
            "error": ValidationError.code,
            "fields": fields,
        },
    )


router = APIRouter()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
def read_root():
    return "Server is running"


# Auth Routes
@router.post(
    "/send-otp",
    response_model=MessageResponse,
    tags=["Authentication"],
    summary="Sign up and send OTP",
    description="Email a one-time code to the given address and create a pending account. "
    "The account is only stored once the email has been sent.",
    responses={
        200: {"description": "The OTP was sent"},
        400: {"description": "The email is already registered or the input failed validation"},
        500: {"description": "The OTP email could not be delivered"},
    },
)
def send_otp(request: SendOTPRequest):
    account_service.request_signup(
        email=request.email,
        first_name=request.firstName,
        last_name=request.lastName,
        password=request.password,
        image=request.image,
    )
    return MessageResponse(message="OTP sent to your email successfully!")


@router.post(
    "/verify-otp",
    response_model=MessageResponse,
    tags=["Authentication"],
    summary="Verify OTP",
    description="Verify the signup OTP. An expired OTP deletes the pending account.",
    responses={
        200: {"description": "The account is verified"},
        400: {"description": "The OTP is invalid or has expired"},
    },
)
def verify_otp(request: VerifyOTPRequest):
    account_service.verify_otp(request.email, request.otp)
    return MessageResponse(message="OTP verified successfully!")


@router.post(
    "/login",
    response_model=LoginResponse,
    tags=["Authentication"],
    summary="Log in",
    responses={
        200: {"description": "Returns the public profile and a login JWT"},
        400: {"description": "Unknown email or wrong password"},
        403: {"description": "The account has not been verified"},
    },
)
def login(request: LoginRequest):
    account = account_service.login(request.email, request.password)
    return {
        "message": "Login is successfully",
        "alert": True,
        "data": account_service.public_profile(account),
        "token": create_access_token(account.email, account.id),
    }


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    tags=["Authentication"],
    summary="Request password reset",
    responses={
        200: {"description": "The reset email was sent"},
        404: {"description": "No account exists for the email"},
        500: {"description": "The reset email could not be delivered"},
    },
)
def forgot_password(request: ForgotPasswordRequest):
    account_service.request_password_reset(request.email)
    return MessageResponse(message="Password reset link sent to your email.")


@router.get(
    "/verify-reset-token/{token}",
    response_model=ResetTokenStatus,
    tags=["Authentication"],
    summary="Check a password reset token",
    responses={
        200: {"description": "The token is valid"},
        400: {"description": "The token is unknown or expired"},
    },
)
def verify_reset_token(token: str):
    if not account_service.validate_reset_token(token):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"valid": False})
    return ResetTokenStatus(valid=True)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    tags=["Authentication"],
    summary="Reset password",
    responses={
        200: {"description": "The password was changed"},
        400: {"description": "The token is unknown or expired"},
    },
)
def reset_password(request: ResetPasswordRequest):
    account_service.reset_password(request.token, request.newPassword)
    return MessageResponse(message="Password has been reset successfully.")


# Customer Info Routes
@router.get(
    "/customer-info/{email}",
    tags=["Customer"],
    summary="Get customer info",
    responses={
        200: {"description": "Return the saved customer info"},
        403: {"description": "The JWT is invalid or belongs to another account"},
        404: {"description": "No customer info saved yet"},
    },
)
def get_customer_info(email: str, token: TokenPayload = Depends(require_account_owner)):
    info = store_service.get_customer_info(email)
    if info is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "No customer info saved")
    return info


@router.post(
    "/customer-info/{email}",
    tags=["Customer"],
    summary="Update customer info",
    responses={
        200: {"description": "The customer info was saved"},
        403: {"description": "The JWT is invalid or belongs to another account"},
    },
)
def update_customer_info(
    email: str,
    request: CustomerInfoRequest,
    token: TokenPayload = Depends(require_account_owner),
):
    fields = {
        "phone": request.phone,
        "address": request.address,
        "city": request.city,
        "country": request.country,
        "postal_code": request.postalCode,
    }
    info = store_service.save_customer_info(email, fields)
    return {"message": "Customer info updated successfully!", "alert": True, "data": info}


# Catalog Routes
@router.post("/uploadProduct", response_model=MessageResponse, tags=["Catalog"])
def upload_product(request: ProductRequest):
    store_service.create_product(Product(**request.model_dump()))
    return MessageResponse(message="Product uploaded successfully")


@router.get("/product", response_model=list[Product], tags=["Catalog"])
def get_products():
    return store_service.list_products()


@router.post("/uploadDiscount", response_model=MessageResponse, tags=["Catalog"])
def upload_discount(request: DiscountRequest):
    if request.endDate < request.startDate:
        raise ValidationError("endDate must not be before startDate")

    discount = Discount(
        code=request.code,
        type=request.type,
        value=request.value,
        start_date=request.startDate,
        end_date=request.endDate,
        time_frame_start=request.timeFrame.start,
        time_frame_end=request.timeFrame.end,
        minimum_order_value=request.minimumOrderValue,
        minimum_items=request.minimumItems,
        applicable_categories=request.applicableCategories,
        usage_limit=request.usageLimit,
    )
    store_service.create_discount(discount)
    return MessageResponse(message="Discount added successfully!")


@router.get("/discounts", response_model=list[Discount], tags=["Catalog"])
def get_discounts():
    return store_service.list_discounts()


# Contact Routes
@router.post("/submit-contact", response_model=MessageResponse, tags=["Contact"])
def submit_contact(request: ContactRequest):
    store_service.create_contact(Contact(**request.model_dump()))
    return MessageResponse(message="Form submitted successfully!")


@router.get("/get-contacts", response_model=list[Contact], tags=["Contact"])
def get_contacts():
    return store_service.list_contacts()


# Payment Routes
@router.post(
    "/create-mock-checkout-session",
    tags=["Payment"],
    summary="Create a mock checkout session",
    description="Validate the cart and return a fake payment session. No payment is processed.",
)
def create_mock_checkout_session(items: list[CheckoutItem]):
    return store_service.create_mock_checkout_session(
        [item.model_dump() for item in items]
    )


# Include router in the app
app.include_router(router)


def main():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
