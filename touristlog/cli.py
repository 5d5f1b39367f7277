# touristlog/cli.py
from datetime import datetime

import click
from flask.cli import with_appcontext

from touristlog.services import users as user_service
from touristlog.services.visitors_report import send_daily_visitors_report


@click.command("user-create")
@click.argument("username")
@click.argument("password")
@with_appcontext
def user_create_cmd(username, password):
    """Create an admin account."""
    try:
        user = user_service.create_user(username, password)
    except user_service.DuplicateUsername:
        click.echo(f"User already exists: {username}")
        return
    click.echo(f"Created user: {user.username}")


@click.command("visitors-report")
@click.option("--day", default=None, help="Day to report on (YYYY-MM-DD). Defaults to today.")
@click.option("--to", "to_addr", default=None, help="Override recipient. Defaults to REPORT_TO_EMAIL.")
@with_appcontext
def send_visitors_report_cmd(day, to_addr):
    """Mail the daily registrations summary."""
    target = None
    if day:
        try:
            target = datetime.strptime(day, "%Y-%m-%d").date()
        except ValueError:
            raise click.BadParameter("expected YYYY-MM-DD", param_hint="--day") from None
    try:
        n = send_daily_visitors_report(target, to_addr)
    except RuntimeError as e:
        raise click.ClickException(str(e)) from None
    click.echo(f"Sent visitors report ({n} registrations)")


def register_cli(app):
    app.cli.add_command(user_create_cmd)
    app.cli.add_command(send_visitors_report_cmd)
