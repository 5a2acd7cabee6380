"""CLI commands for recurring transactions.

Usage:
    flask process-recurring                    # Materialise everything due today
    flask process-recurring --user 1           # Only for one user
    flask process-recurring --as-of 2024-05-01
    flask send-bill-reminders --user 1
"""

from __future__ import annotations

import datetime as dt

import click
from flask.cli import with_appcontext

from fintrack.domains.finance.services import recurring_service


@click.command("process-recurring")
@click.option("--user", "-u", type=int, help="Process for specific user ID only")
@click.option("--as-of", type=click.DateTime(formats=["%Y-%m-%d"]), help="Treat this date as today")
@with_appcontext
def process_recurring_command(user: int | None, as_of: dt.datetime | None):
    """Create transactions for recurring items that are due."""
    processed = recurring_service.process_due(as_of=as_of.date() if as_of else None, user_id=user)
    for row in processed:
        item = row["recurring"]
        click.echo(f"  {item.title} (user {item.user_id}): next due {item.next_due_date.isoformat()}")
    click.echo(f"Processed {len(processed)} recurring transaction(s)")


@click.command("send-bill-reminders")
@click.option("--user", "-u", type=int, required=True, help="User ID to remind")
@click.option("--as-of", type=click.DateTime(formats=["%Y-%m-%d"]), help="Treat this date as today")
@with_appcontext
def send_reminders_command(user: int, as_of: dt.datetime | None):
    """Create bill reminder notifications for upcoming recurring items."""
    created = recurring_service.send_reminders(user, as_of=as_of.date() if as_of else None)
    click.echo(f"Created {created} reminder(s)")


def register_commands(app):
    app.cli.add_command(process_recurring_command)
    app.cli.add_command(send_reminders_command)
