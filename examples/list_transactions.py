"""Read balances, details and transactions of the first linked account

Reads GOCARDLESS_SECRET_ID and GOCARDLESS_SECRET_KEY from the environment.
"""

import asyncio
import logging

from gocardless_client.config import settings
from gocardless_client.domain.models import RequisitionStatus
from gocardless_client.infrastructure.clients.gocardless import GoCardlessClient
from gocardless_client.infrastructure.observability.logging import setup_logging


async def main() -> None:
    if settings.secret_id is None or settings.secret_key is None:
        raise SystemExit("GOCARDLESS_SECRET_ID and GOCARDLESS_SECRET_KEY must be set")

    async with await GoCardlessClient.authenticate(settings.secret_id, settings.secret_key) as client:
        page = await client.list_requisitions()
        linked = next((r for r in page.results if r.status is RequisitionStatus.LINKED), None)
        if linked is None or not linked.accounts:
            raise SystemExit("No linked requisition yet; finish the bank journey first")

        account_id = linked.accounts[0]
        balances = await client.list_balances(account_id)
        details = await client.get_account_details(account_id)
        transactions = await client.list_transactions(account_id)

        for balance in balances:
            logging.info(
                "Balance",
                extra={
                    "balance_type": balance.balance_type,
                    "amount": balance.balance_amount.amount,
                    "currency": balance.balance_amount.currency,
                },
            )
        logging.info("Account", extra={"account_name": details.name if details else None})
        logging.info(
            "Transactions",
            extra={"booked": len(transactions.booked), "pending": len(transactions.pending)},
        )


if __name__ == "__main__":
    setup_logging(settings.log_level)
    asyncio.run(main())
