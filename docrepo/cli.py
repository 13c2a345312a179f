"""Command line entry for DocRepo."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging

import uvicorn

from docrepo.models.user import UserRole
from docrepo.services.users import InvalidEmail, UserExists, normalize_email


def run_server(host: str, port: int) -> None:
    uvicorn.run("docrepo.main:app", host=host, port=port)


async def _create_admin(email: str, password: str, display_name: str, role: UserRole) -> None:
    from docrepo.core.database import async_session_factory, dispose_db, init_db
    from docrepo.services.users import create_user

    await init_db()
    try:
        async with async_session_factory() as session:
            await create_user(session, email, password, display_name=display_name, role=role)
    finally:
        await dispose_db()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="docrepo")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP server")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    admin = sub.add_parser("create-admin", help="create an admin panel account")
    admin.add_argument("email")
    admin.add_argument("--name", default="")
    admin.add_argument("--role", choices=[r.value for r in UserRole], default=UserRole.ADMIN.value)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "serve":
        run_server(args.host, args.port)
        return

    try:
        email = normalize_email(args.email)
    except InvalidEmail as exc:
        parser.error(str(exc))
    password = getpass.getpass("Password: ")
    try:
        asyncio.run(_create_admin(email, password, args.name, UserRole(args.role)))
    except UserExists:
        parser.error(f"an account for {email} already exists")


if __name__ == "__main__":
    main()
