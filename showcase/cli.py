"""
Command line interface for database setup and photo maintenance.
Results are printed as JSON; the exit status is 0 on success and 1 otherwise.
"""

import argparse
import asyncio
import json
import logging
import sys
import uuid
from typing import List, Optional

from showcase import database
from showcase.config import settings
from showcase.services.auth import AuthService
from showcase.services.photo_restore import PhotoRestoreService

logger = logging.getLogger(__name__)


def _print_json(payload) -> None:
    if hasattr(payload, "model_dump_json"):
        print(payload.model_dump_json(indent=2))
    else:
        print(json.dumps(payload, indent=2, default=str))


async def init_db() -> int:
    await database.create_tables()
    _print_json({"success": True, "message": "Database tables created"})
    return 0


async def create_owner(username: str, email: str, password: Optional[str]) -> int:
    if not password:
        _print_json({"success": False, "errors": ["An owner password is required"]})
        return 1

    async with database.AsyncSessionLocal() as session:
        try:
            owner = await AuthService(session).ensure_owner_account(username, email, password)
        except ValueError as e:
            _print_json({"success": False, "errors": [str(e)]})
            return 1

    if owner is None:
        _print_json({"success": False, "errors": [f"User {username} already exists"]})
        return 1

    _print_json({"success": True, "id": str(owner.id), "username": owner.username, "role": owner.role.value})
    return 0


async def restore_photos(
    property_id: Optional[str],
    restore_all: bool,
    dry_run: bool,
    check_file_existence: bool,
    use_backup: bool
) -> int:
    if not restore_all and not property_id:
        _print_json({"success": False, "errors": ["Provide a property id or --all"]})
        return 1

    target_id = None
    if not restore_all:
        try:
            target_id = uuid.UUID(property_id)
        except ValueError:
            _print_json({"success": False, "errors": [f"Invalid property id: {property_id}"]})
            return 1

    async with database.AsyncSessionLocal() as session:
        service = PhotoRestoreService(session)
        if restore_all:
            result = await service.restore_all_properties(
                dry_run=dry_run,
                check_file_existence=check_file_existence,
                use_backup=use_backup
            )
        else:
            result = await service.restore_property_images(
                target_id,
                dry_run=dry_run,
                check_file_existence=check_file_existence,
                use_backup=use_backup
            )

    _print_json(result)
    return 0 if result.success else 1


async def recover_assets(dry_run: bool) -> int:
    async with database.AsyncSessionLocal() as session:
        result = PhotoRestoreService(session).recover_assets(dry_run=dry_run)
    _print_json(result)
    return 0 if result.success else 1


async def photo_report() -> int:
    async with database.AsyncSessionLocal() as session:
        report = await PhotoRestoreService(session).restoration_report()
    _print_json(report)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="showcase", description="Property showcase maintenance commands")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create database tables")

    owner_parser = subparsers.add_parser("create-owner", help="Create the owner account")
    owner_parser.add_argument("--username", default=settings.owner_username)
    owner_parser.add_argument("--email", default=settings.owner_email)
    owner_parser.add_argument("--password", default=settings.owner_password)

    restore_parser = subparsers.add_parser("restore-photos", help="Reconcile property images with files on disk")
    restore_parser.add_argument("property_id", nargs="?", help="Property to restore")
    restore_parser.add_argument("--all", action="store_true", dest="restore_all", help="Restore every property")
    restore_parser.add_argument("--dry-run", action="store_true", help="Report without copying or writing")
    restore_parser.add_argument("--skip-file-check", action="store_true", help="Keep references without checking files")
    restore_parser.add_argument("--use-backup", action="store_true", help="Merge the latest JSON snapshot")

    recover_parser = subparsers.add_parser("recover-assets", help="Copy images from the assets directory")
    recover_parser.add_argument("--dry-run", action="store_true", help="Report without copying")

    subparsers.add_parser("photo-report", help="Referenced, valid and missing images per property")

    return parser


async def _run(args: argparse.Namespace) -> int:
    try:
        if args.command == "init-db":
            return await init_db()
        if args.command == "create-owner":
            return await create_owner(args.username, args.email, args.password)
        if args.command == "restore-photos":
            return await restore_photos(
                args.property_id,
                args.restore_all,
                args.dry_run,
                not args.skip_file_check,
                args.use_backup
            )
        if args.command == "recover-assets":
            return await recover_assets(args.dry_run)
        if args.command == "photo-report":
            return await photo_report()
        return 1
    finally:
        await database.close_db_connection()


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``showcase`` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        return asyncio.run(_run(args))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
