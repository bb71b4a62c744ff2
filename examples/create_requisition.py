"""Create a requisition for Starling Bank and print the link the end user must visit

Reads GOCARDLESS_SECRET_ID and GOCARDLESS_SECRET_KEY from the environment.
"""

import asyncio
import logging

from gocardless_client.config import settings
from gocardless_client.infrastructure.clients.gocardless import GoCardlessClient
from gocardless_client.infrastructure.observability.logging import setup_logging
from gocardless_client.utils.references import generate_reference


async def main() -> None:
    if settings.secret_id is None or settings.secret_key is None:
        raise SystemExit("GOCARDLESS_SECRET_ID and GOCARDLESS_SECRET_KEY must be set")

    async with await GoCardlessClient.authenticate(settings.secret_id, settings.secret_key) as client:
        institutions = await client.get_institutions()
        starling = next(inst for inst in institutions if inst.name.startswith("Starling Bank"))

        agreement = await client.create_end_user_agreement(starling.id, 180)
        requisition = await client.create_requisition(
            "https://www.example.org",
            starling.id,
            agreement.id,
            generate_reference(),
        )
        logging.info("Requisition created", extra={"requisition_id": requisition.id, "link": requisition.link})


if __name__ == "__main__":
    setup_logging(settings.log_level)
    asyncio.run(main())
