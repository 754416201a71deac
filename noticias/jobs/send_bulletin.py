"""
Generate today's bulletin of a given type and deliver it to subscribers.

Meant to run from a scheduler, e.g.:

    python -m noticias.jobs.send_bulletin manana
    python -m noticias.jobs.send_bulletin weekly --dry-run
"""
import argparse
import logging
import sys

from dotenv import load_dotenv

# ENVIRONMENT must be set before settings load
load_dotenv()

from noticias.api.deps import get_bulletin_service, get_mail_sender
from noticias.db.session import SessionLocal
from noticias.schemas import BULLETIN_TYPE_ALIASES, BulletinType

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

TYPE_CHOICES = [t.value for t in BulletinType] + list(BULLETIN_TYPE_ALIASES)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and send a newsletter bulletin")
    parser.add_argument("type", choices=TYPE_CHOICES, help="bulletin type")
    parser.add_argument("--dry-run", action="store_true", help="store the bulletin without sending it")
    return parser


def main(argv=None, service=None, session_factory=SessionLocal) -> int:
    args = build_parser().parse_args(argv)
    service = service or get_bulletin_service(mail_sender=get_mail_sender())

    with session_factory() as db:
        bulletin = service.create_bulletin(db, args.type)
        if bulletin is None:
            logger.info(f"No content for {args.type} bulletin today. Nothing to send.")
            return 0

        if args.dry_run:
            logger.info(f"Dry run: bulletin {bulletin.id} stored with status {bulletin.status}")
            return 0

        bulletin = service.send_bulletin(db, bulletin.id)
        logger.info(f"Bulletin {bulletin.id} finished with status {bulletin.status}")
        return 1 if bulletin.status == "failed" else 0


if __name__ == "__main__":
    sys.exit(main())
