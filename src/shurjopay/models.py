"""
shurjoPay data models for payment integration.

This module defines the data structures exchanged with the shurjoPay gateway:
the authentication token, payment requests and responses, and verified orders.
Python attribute names are snake_case; the gateway's JSON keys are declared as
field aliases where they differ.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


SUCCESS_MESSAGE = "Ok"


class ShurjoPayStatusCode(str, Enum):
    """shurjoPay transaction status codes (sp_code)."""
    SUCCESS = "1000"
    DECLINED = "1001"
    CANCELLED = "1002"
    FAILED = "1005"
    INVALID_ORDER_ID = "1068"


class ShurjoPayToken(BaseModel):
    """
    Authentication token issued by the get_token endpoint.

    Every field is optional on decode so that a rejected authentication
    response can still be read and its message inspected.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    token: Optional[str] = Field(None, description="Bearer token string")
    token_type: Optional[str] = Field(None, description="Token type, e.g. Bearer")
    store_id: Optional[str] = Field(None, description="Merchant store identifier")
    execute_url: Optional[str] = Field(None, description="Payment execution URL")
    sp_code: Optional[str] = Field(None, description="Gateway status code")
    message: Optional[str] = Field(None, description="Authentication status message")
    token_create_time: Optional[str] = Field(
        None, description="Creation time as yyyy-MM-dd hh:mm:ssAM/PM"
    )
    expires_in: Optional[int] = Field(None, description="Lifetime in seconds")

    @property
    def is_usable(self) -> bool:
        """True when the gateway reported a successful authentication."""
        return self.message == SUCCESS_MESSAGE

    def authorization_header(self) -> str:
        """Value for the Authorization header."""
        return f"{self.token_type} {self.token}"


class PaymentRequest(BaseModel):
    """
    Payment initiation request.

    return_url, cancel_url, auth_token and store_id are overwritten by the
    client immediately before the request is sent.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        populate_by_name=True,
    )

    prefix: str = Field(..., min_length=1, description="Merchant order prefix")
    amount: float = Field(..., gt=0, description="Payable amount")
    order_id: str = Field(..., min_length=1, description="Merchant order identifier")
    currency: str = Field(default="BDT", description="Currency code")
    customer_name: str = Field(..., description="Customer name")
    customer_address: str = Field(..., description="Customer address")
    customer_phone: str = Field(..., description="Customer phone number")
    customer_city: str = Field(..., description="Customer city")
    customer_post_code: Optional[str] = Field(None, description="Customer post code")
    customer_email: Optional[str] = Field(None, description="Customer email")
    client_ip: Optional[str] = Field(None, description="Client IP address")
    discount_amount: Optional[float] = Field(None, ge=0, description="Discount amount")
    disc_percent: Optional[float] = Field(None, ge=0, le=100, description="Discount percentage")
    customer_state: Optional[str] = Field(None, description="Customer state")
    customer_country: Optional[str] = Field(None, description="Customer country")
    shipping_address: Optional[str] = Field(None, description="Shipping address")
    shipping_city: Optional[str] = Field(None, description="Shipping city")
    shipping_country: Optional[str] = Field(None, description="Shipping country")
    received_person_name: Optional[str] = Field(None, description="Receiver name")
    shipping_phone_number: Optional[str] = Field(None, description="Shipping phone")
    value1: Optional[str] = None
    value2: Optional[str] = None
    value3: Optional[str] = None
    value4: Optional[str] = None

    # Injected by the client
    return_url: Optional[str] = Field(None, description="Redirect after payment")
    cancel_url: Optional[str] = Field(None, description="Redirect after cancellation")
    auth_token: Optional[str] = Field(None, alias="token", description="Session token")
    store_id: Optional[str] = Field(None, description="Merchant store identifier")


class PaymentResponse(BaseModel):
    """Payment initiation response containing the checkout URL."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="allow",
    )

    checkout_url: Optional[str] = Field(None, description="Hosted payment page URL")
    amount: Optional[float] = Field(None, description="Payable amount")
    currency: Optional[str] = Field(None, description="Currency code")
    sp_order_id: Optional[str] = Field(None, description="Gateway order identifier")
    customer_order_id: Optional[str] = Field(None, description="Merchant order identifier")
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    customer_city: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    client_ip: Optional[str] = None
    intent: Optional[str] = None
    transaction_status: Optional[str] = Field(None, alias="transactionStatus")


class VerifiedOrder(BaseModel):
    """Order details returned by the verification and payment-status endpoints."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="allow",
    )

    id: Optional[int] = None
    order_id: Optional[str] = Field(None, description="Gateway order identifier")
    currency: Optional[str] = None
    amount: Optional[float] = None
    payable_amount: Optional[float] = None
    discount_amount: Optional[float] = Field(None, alias="discsount_amount")
    disc_percent: Optional[float] = None
    received_amount: Optional[float] = None
    usd_amt: Optional[float] = None
    usd_rate: Optional[float] = None
    card_holder_name: Optional[str] = None
    card_number: Optional[str] = None
    phone_no: Optional[str] = None
    bank_trx_id: Optional[str] = None
    invoice_no: Optional[str] = None
    bank_status: Optional[str] = None
    customer_order_id: Optional[str] = None
    sp_code: Optional[str] = None
    sp_message: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    value1: Optional[str] = None
    value2: Optional[str] = None
    value3: Optional[str] = None
    value4: Optional[str] = None
    transaction_status: Optional[str] = None
    method: Optional[str] = None
    date_time: Optional[str] = None

    @property
    def status(self) -> Optional[ShurjoPayStatusCode]:
        """Map sp_code to a known status code, None if unrecognised."""
        try:
            return ShurjoPayStatusCode(self.sp_code)
        except ValueError:
            return None

    def is_successful(self) -> bool:
        """Check if the gateway reports the payment as completed."""
        return self.sp_code == ShurjoPayStatusCode.SUCCESS.value
