import json
from pathlib import Path
from typing import Optional
import typer
from pydantic import ValidationError as PayloadError
from dexstats.errors import DexStatsError
from dexstats.schemas.trade import TradePayload
from dexstats.scheduler.sync_tasks import build_relayer_service
from dexstats.storage.daos.trade_dao import TradeDao
from dexstats.storage.db import Database
from dexstats.utils.shortname import ShortNameFilter
import logging

log = logging.getLogger(__name__)

app = typer.Typer(help="Relayer mirror and trade store maintenance")

DatabaseUrl = typer.Option(None, "--database-url", help="Overrides DATABASE_URL")


@app.callback()
def setup():
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(shortname)s: %(message)s")
    for handler in logging.getLogger().handlers:
        handler.addFilter(ShortNameFilter())


@app.command("init-db")
def init_db(database_url: Optional[str] = DatabaseUrl):
    """Create missing tables."""
    database = Database(database_url)
    try:
        database.create_all()
        log.info("[cli] Tables created")
    finally:
        database.dispose()


def _sync(database_url: Optional[str], run):
    database = Database(database_url, worker=True)
    try:
        with database.session() as db:
            report = run(build_relayer_service(db))
    except DexStatsError as e:
        log.error(f"[cli] Sync failed: {e}")
        raise typer.Exit(code=1)
    finally:
        database.dispose()

    for outcome in report.failed:
        log.warning(f"[cli] {outcome}")
    typer.echo(json.dumps(report.to_dict()))
    if not report.ok:
        raise typer.Exit(code=2)


@app.command("sync")
def sync(database_url: Optional[str] = DatabaseUrl):
    """Reconcile the whole relayer fleet against the chain."""
    _sync(database_url, lambda svc: svc.update_relayers())


@app.command("sync-relayer")
def sync_relayer(
    address: str = typer.Argument(..., help="Relayer coinbase, 0x..."),
    database_url: Optional[str] = DatabaseUrl,
):
    """Reconcile a single relayer."""
    _sync(database_url, lambda svc: svc.update_relayer(address))


@app.command("import-trades")
def import_trades(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON lines, one trade per line"),
    database_url: Optional[str] = DatabaseUrl,
):
    """Upsert trades keyed on their hash. Bad lines are reported and skipped."""
    database = Database(database_url, worker=True)
    imported, rejected = 0, 0
    try:
        with database.session() as db, path.open() as fh:
            dao = TradeDao(db)
            for lineno, line in enumerate(fh, start=1):
                if not line.strip():
                    continue
                try:
                    trade = TradePayload.model_validate_json(line)
                except PayloadError as e:
                    log.warning(f"[cli] line {lineno} rejected: {e.errors()[0]['msg']}")
                    rejected += 1
                    continue
                dao.upsert(trade.to_row())
                imported += 1
    except DexStatsError as e:
        log.error(f"[cli] Import stopped: {e}")
        raise typer.Exit(code=1)
    finally:
        database.dispose()

    typer.echo(json.dumps({"imported": imported, "rejected": rejected}))


def main():
    app()


if __name__ == "__main__":
    main()
