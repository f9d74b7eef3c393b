"""POST /v1/installments/payment - pay this month's installment from cash"""

from datetime import date
from fastapi import APIRouter, HTTPException

from cashflow_gateway.api.v1.schemas import InstallmentPaymentRequest, InstallmentPaymentResponse
from cashflow_gateway.api.v1 import converters
from cashflow_gateway.domain.exceptions import InvalidInputError
from cashflow_gateway.domain.installments import record_installment_payment

router = APIRouter()


@router.post("/installments/payment", response_model=InstallmentPaymentResponse)
def pay_installment(request_body: InstallmentPaymentRequest):
    """
    Advance an installment debt by one period.

    Returns the updated debt and the cash expense to record in the ledger;
    the caller persists both. Paying twice in the same month is rejected.
    """
    try:
        debt, payment = record_installment_payment(
            converters.to_installment_debt(request_body.debt),
            request_body.paid_on or date.today(),
            account_id=request_body.account_id,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return InstallmentPaymentResponse(
        debt=converters.from_installment_debt(debt),
        payment=converters.from_transaction(payment),
    )
