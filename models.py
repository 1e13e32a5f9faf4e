from datetime import date
from typing import Annotated

from pydantic import BaseModel, Field, model_validator

RequiredStr = Annotated[str, Field(min_length=1)]


class SendOTPRequest(BaseModel):
    firstName: RequiredStr
    lastName: RequiredStr
    password: RequiredStr
    confirmPassword: RequiredStr
    email: RequiredStr
    image: RequiredStr

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirmPassword:
            raise ValueError("Password and confirm password do not match")
        return self


class VerifyOTPRequest(BaseModel):
    email: RequiredStr
    otp: RequiredStr


class LoginRequest(BaseModel):
    email: RequiredStr
    password: RequiredStr


class ForgotPasswordRequest(BaseModel):
    email: RequiredStr


class ResetPasswordRequest(BaseModel):
    token: RequiredStr
    newPassword: RequiredStr


class MessageResponse(BaseModel):
    message: str
    alert: bool = True


class AccountProfile(BaseModel):
    id: int
    firstName: str
    lastName: str
    email: str
    image: str


class LoginResponse(BaseModel):
    message: str
    alert: bool
    data: AccountProfile
    token: str


class ResetTokenStatus(BaseModel):
    valid: bool


class ProductRequest(BaseModel):
    name: RequiredStr
    category: RequiredStr
    image: RequiredStr
    price: RequiredStr
    description: str = ""


class TimeFrame(BaseModel):
    start: RequiredStr
    end: RequiredStr


class DiscountRequest(BaseModel):
    code: RequiredStr
    type: RequiredStr
    value: float = Field(gt=0)
    startDate: date
    endDate: date
    timeFrame: TimeFrame
    minimumOrderValue: float = Field(gt=0)
    minimumItems: int = Field(gt=0)
    applicableCategories: list[str] = Field(min_length=1)
    usageLimit: int = Field(gt=0)


class ContactRequest(BaseModel):
    name: RequiredStr
    email: RequiredStr
    phone: RequiredStr
    message: RequiredStr


class CustomerInfoRequest(BaseModel):
    phone: RequiredStr
    address: RequiredStr
    city: RequiredStr
    country: RequiredStr
    postalCode: str | None = None


class CheckoutItem(BaseModel):
    price: float = Field(ge=0)
    qty: int = Field(gt=0)
