import click
from flask import current_app
from flask.cli import with_appcontext

from .ledger import SqlAlchemyStore, reconcile_counters
from .utils.audit import audit_log
from .extensions import db


@click.command("reconcile-tallies")
@click.option("--election-id", type=click.UUID, default=None, help="Only reconcile this election.")
@with_appcontext
def reconcile_tallies_command(election_id):
    """Rebuild cached vote counters from the votes table."""
    corrections = reconcile_counters(SqlAlchemyStore(), election_id=election_id)

    if not corrections:
        click.echo("All vote counters are consistent.")
        return

    for report in corrections:
        audit_log(
            action="TALLY_RECONCILED",
            entity_type="ELECTION",
            entity_id=report["election_id"],
            details={"source": "cli", "candidates_fixed": len(report["candidates"]),
                     "total_votes": report["total_votes"]},
        )
        click.echo(
            f"election {report['election_id']}: total={report['total_votes']} "
            f"candidates fixed={len(report['candidates'])}"
        )
    db.session.commit()
    current_app.logger.info("reconcile-tallies repaired %d election(s)", len(corrections))
