"""Command line entry points for HabitPulse."""

from __future__ import annotations

import click

from .config import WEEK_START_CHOICES, BaseConfig
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .models.habit import Habit
from .services.habits import HabitNotFoundError


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track habits and their weekly streaks."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = create_app_context(config)


@cli.command("init-db")
@click.pass_obj
def init_db(app: AppContext) -> None:
    """Create the database schema."""

    click.echo(f"Database ready: {app.config.DATABASE_URL}")


@cli.command("add-habit")
@click.argument("name")
@click.option("--frequency", type=click.IntRange(1, 7), default=1, show_default=True)
@click.option("--emoji", default="")
@click.option("--daily-goal", type=click.IntRange(min=1), default=1, show_default=True)
@click.pass_obj
def add_habit(app: AppContext, name: str, frequency: int, emoji: str, daily_goal: int) -> None:
    """Create a habit with a weekly target."""

    habit = app.habit_repo.create(
        Habit(name=name, emoji=emoji, frequency=frequency, daily_goal=daily_goal)
    )
    click.echo(f"{habit.id}\t{habit.name}\t{habit.frequency}x/week")


@cli.command("done")
@click.argument("habit_id")
@click.option("--day", default=None, help="Day to toggle (YYYY-MM-DD), default today")
@click.pass_obj
def done(app: AppContext, habit_id: str, day: str | None) -> None:
    """Toggle a habit's completion for a day."""

    try:
        outcome = app.tracker.toggle_completion(habit_id, day)
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--day") from exc

    state = "done" if outcome.completed else "not done"
    click.echo(f"{outcome.habit.name}: {state}, streak {outcome.streak.current_streak}")
    for event in outcome.celebrations:
        click.echo(f"  * {event.title} {event.body}")


@cli.command("streaks")
@click.option("--today", default=None, help="Evaluate as of this day (YYYY-MM-DD)")
@click.pass_obj
def streaks(app: AppContext, today: str | None) -> None:
    """Show every habit's current streak."""

    results = app.tracker.streaks(today)
    for habit in app.habit_repo.list_all():
        result = results[habit.id]
        since = result.streak_start_date or "-"
        broken = result.last_streak_broken_at or "-"
        click.echo(f"{habit.name}\t{result.current_streak}\tsince {since}\tbroken {broken}")


@cli.command("week-start")
@click.argument("value", required=False, type=click.Choice(WEEK_START_CHOICES))
@click.pass_obj
def week_start(app: AppContext, value: str | None) -> None:
    """Show or change the first day of the week."""

    if value:
        app.settings_repo.set_week_start(value)
    click.echo(app.settings_repo.get_week_start())


def main() -> None:
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
