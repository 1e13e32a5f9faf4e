import logging
import os

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import (
    AWS_ACCESS_KEY,
    AWS_REGION,
    AWS_SECRET_ACCESS_KEY,
    AWS_SES_SENDER_EMAIL,
    EMAIL_SEND_TIMEOUT_SECONDS,
    FRONTEND_URL,
    OTP_LIFETIME_MINUTES,
    RESET_TOKEN_LIFETIME_MINUTES,
)
from services.errors import DeliveryError

logger = logging.getLogger("storefront_api.email")

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")

# Set up Jinja env
env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml", "jinja"]),
)

signup_template = env.get_template("signup_otp.html.jinja")
reset_template = env.get_template("reset_password.html.jinja")

# A hung provider must not stall the request; botocore raises on timeout
ses = boto3.client(
    "ses",
    region_name=AWS_REGION,
    aws_access_key_id=str(AWS_ACCESS_KEY),
    aws_secret_access_key=str(AWS_SECRET_ACCESS_KEY),
    config=BotoConfig(
        connect_timeout=EMAIL_SEND_TIMEOUT_SECONDS,
        read_timeout=EMAIL_SEND_TIMEOUT_SECONDS,
        retries={"max_attempts": 1},
    ),
)


def send_email(to_address: str, subject: str, text_body: str, html_body: str) -> str:
    """
    Send a single email through SES.

    Returns:
        The SES message id

    Raises:
        DeliveryError: If SES rejects the message or cannot be reached in time
    """
    try:
        resp = ses.send_email(
            Source=AWS_SES_SENDER_EMAIL,
            Destination={"ToAddresses": [to_address]},
            Message={
                "Subject": {"Data": subject},
                "Body": {
                    "Html": {"Data": html_body},
                    "Text": {"Data": text_body},
                },
            },
        )
    except ClientError as e:
        code = e.response["Error"]["Code"]
        logger.error(f"SES {code} when sending '{subject}' to {to_address}")
        raise DeliveryError() from e
    except BotoCoreError as e:
        # Connection failures and timeouts
        logger.error(f"SES unreachable when sending '{subject}' to {to_address}: {e}")
        raise DeliveryError() from e

    message_id = resp.get("MessageId")
    logger.info(f"Email sent: to={to_address}, subject='{subject}', Message ID: {message_id}")
    return message_id


def send_signup_otp_email(email: str, otp: str, first_name: str = "") -> str:
    html_body = signup_template.render(
        otp=otp, first_name=first_name, lifetime=OTP_LIFETIME_MINUTES
    )
    text_body = (
        f"Your OTP is: {otp}. It will expire in {OTP_LIFETIME_MINUTES} minutes.\n\nThank you!"
    )
    return send_email(email, "Your OTP for Signup Verification", text_body, html_body)


def send_reset_password_email(email: str, token: str) -> str:
    reset_url = f"{FRONTEND_URL}/reset-password/{token}"
    html_body = reset_template.render(
        reset_url=reset_url, lifetime=RESET_TOKEN_LIFETIME_MINUTES
    )
    text_body = (
        "You requested a password reset. Open the link below to choose a new password:\n\n"
        f"{reset_url}\n\nThis link expires in {RESET_TOKEN_LIFETIME_MINUTES} minutes."
    )
    return send_email(email, "Password Reset Request", text_body, html_body)
