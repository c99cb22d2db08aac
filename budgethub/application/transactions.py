"""
Transaction use cases - booking income/expense rows against a financial account
"""
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from budgethub.infrastructure.db.models import (
    FinancialAccount, Transaction,
    TRANSACTION_TYPES, TRANSACTION_TYPE_EXPENSE,
)


class TransactionValidationError(ValueError):
    """Transaction cannot be booked"""
    pass


class CreateTransactionUseCase:
    """
    Use case: book one transaction and apply it to the account balance.

    Does not commit - the caller owns the unit of work.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        hub_id: int,
        financial_account_id: int,
        type: str,
        amount: Decimal,
        occurred_on: date,
        category_id: int | None = None,
        source: str | None = None,
        note: str | None = None,
        recurring_template_id: int | None = None,
    ) -> Transaction:
        """
        Create a transaction

        Returns:
            the flushed Transaction row

        Raises:
            TransactionValidationError: bad amount/type, unknown account,
                insufficient funds for an expense
        """
        if type not in TRANSACTION_TYPES:
            raise TransactionValidationError(f"Unknown transaction type: {type}")

        amount = Decimal(amount)
        if amount <= 0:
            raise TransactionValidationError("Amount must be greater than zero")

        account = self.db.query(FinancialAccount).filter(
            FinancialAccount.id == financial_account_id,
            FinancialAccount.hub_id == hub_id,
        ).first()
        if not account:
            raise TransactionValidationError(f"Financial account #{financial_account_id} not found")

        if type == TRANSACTION_TYPE_EXPENSE:
            if account.balance < amount:
                raise TransactionValidationError(
                    f"Insufficient funds on account \"{account.name}\": "
                    f"balance {account.balance}, required {amount}"
                )
            account.balance = account.balance - amount
        else:
            account.balance = account.balance + amount

        tx = Transaction(
            hub_id=hub_id,
            financial_account_id=financial_account_id,
            category_id=category_id,
            type=type,
            amount=amount,
            occurred_on=occurred_on,
            source=source,
            note=note,
            recurring_template_id=recurring_template_id,
        )
        self.db.add(tx)
        self.db.flush()
        return tx
