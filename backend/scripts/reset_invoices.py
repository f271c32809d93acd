"""Wipe every issued invoice and restart all owner series.

Intended for staging databases only; refuses to run when APP_ENV is production
unless ``--force`` is given.
"""
from __future__ import annotations

import argparse
import asyncio

from roomflow.core.config import get_settings
from roomflow.db.session import dispose_engine, get_sessionmaker
from roomflow.services.invoice_service import reset_all_invoices


async def reset() -> int:
    sessionmaker = get_sessionmaker()
    try:
        async with sessionmaker() as session:
            return await reset_all_invoices(session)
    finally:
        await dispose_engine()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--force", action="store_true", help="allow running in production")
    args = parser.parse_args()

    settings = get_settings()
    if settings.app_env == "production" and not args.force:
        raise SystemExit("Refusing to reset invoices in production without --force")
    cleared = asyncio.run(reset())
    print(f"Cleared {cleared} invoiced reservation(s).")


if __name__ == "__main__":
    main()
