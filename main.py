import argparse
import asyncio
import logging

from config import Settings, get_settings
from core.app_context import get_app_context
from database.init import create_tables, init_from_env
from utils.logging_config import setup_logging

__all__ = ["main"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Timely CRM: назначения и синхронизация")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="создать таблицы")
    sub.add_parser("sync", help="подтянуть назначения клиент-консультант с сервера")

    rel = sub.add_parser("relations", help="показать связи сущности")
    rel.add_argument("entity", choices=["project", "client", "consultant"])
    rel.add_argument("entity_id")
    return parser


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Точка входа командной строки."""

    args = _build_parser().parse_args(argv)
    settings = settings or get_settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL не задан в .env")

    init_from_env(settings.database_url)
    setup_logging(settings)
    logger = logging.getLogger(__name__)
    create_tables()

    context = get_app_context()
    assignments = context.assignment_service

    if args.command == "init-db":
        logger.info("Таблицы созданы")
        return 0

    if args.command == "sync":
        result = asyncio.run(context.sync_service.sync_from_remote())
        print(f"{result.status.value}: remote={result.remote_count} local_only={result.local_only_count}")
        return 0 if result.ok else 1

    if args.entity == "project":
        rel = assignments.project_relationships(args.entity_id)
        print("consultants:", ", ".join(rel.consultant_ids) or "-")
        print("clients:", ", ".join(rel.client_ids) or "-")
    elif args.entity == "client":
        rel = assignments.client_relationships(args.entity_id)
        print("projects:", ", ".join(rel.project_ids) or "-")
        print("consultants:", ", ".join(rel.consultant_ids) or "-")
    else:
        rel = assignments.consultant_relationships(args.entity_id)
        print("projects:", ", ".join(rel.project_ids) or "-")
        print("clients:", ", ".join(rel.client_ids) or "-")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
