"""Command line entry point: `starter install`."""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from starter.models import DEFAULT_URL, InstallOptions, InstallReport
from starter.services.env_file import EnvFileError
from starter.services.installer import InstallError, Installer

logger = logging.getLogger(__name__)


def info(message: str) -> None:
    click.echo(message)


def warning(message: str) -> None:
    click.secho(message, fg="yellow")


def _ask(question: str, answer: bool | None, default: bool, interactive: bool) -> bool:
    if answer is not None:
        return answer
    if not interactive:
        return default
    return click.confirm(question, default=default)


def _text(label: str, default: str, interactive: bool) -> str:
    if not interactive:
        return default
    value = click.prompt(label, default=default)
    return value.strip() or default


def run_install(options: InstallOptions, installer: Installer | None = None) -> InstallReport:
    """Run every install step in order, asking whatever options left open."""
    report = InstallReport()
    installer = installer or Installer(options)

    info("Starting App installation...")
    if installer.install_dependencies():
        report.dependencies_installed = True
    else:
        warning("Dependencies already installed. Skipping.")

    info("Setting up .env file...")
    report.env_created, report.env_flag_added = installer.setup_env_file()
    if not report.env_created:
        warning(".env file already exists. Skipping creation.")
    if report.env_flag_added:
        info("APP_ENV set to local.")
    installer.reload()

    info("Checking application key...")
    report.key_generated = installer.generate_app_key()
    if not report.key_generated:
        warning("Application key already exists. Skipping.")

    if _ask("Do you want to run database migrations?", options.migrate, True, options.interactive):
        info("Running database migrations...")
        installer.run_migrations()
        report.migrated = True

    # NAME only seeds the default; the operator is still asked
    report.name = _text("What is the name of your project?", options.default_name, options.interactive)
    report.url = options.url or _text("What is the URL of your project?", DEFAULT_URL, options.interactive)
    report.details_updated = installer.set_project_details(report.name, report.url)

    if _ask("Do you want to remove the installation files?", options.cleanup, False, options.interactive):
        info("Removing installation files...")
        report.cleaned_up = installer.cleanup()
        if report.cleaned_up:
            info("Installation files removed.")
    else:
        info("Installation files kept. You can manually remove them later if needed.")

    return report


@click.group()
def cli():
    """Starter application commands."""


@cli.command()
@click.argument("name", required=False)
@click.option("--url", help="Project URL written to APP_URL.")
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Project directory containing .env.example.",
)
@click.option("--migrate/--no-migrate", default=None, help="Run database migrations from scratch.")
@click.option("--cleanup/--no-cleanup", default=None, help="Delete the installer script afterwards.")
@click.option(
    "-n", "--no-interaction", "no_interaction", is_flag=True, help="Take defaults instead of asking."
)
def install(name, url, base_dir, migrate, cleanup, no_interaction):
    """Install the application. NAME is the default project name."""
    options = InstallOptions(
        base_dir=base_dir,
        name=name,
        url=url,
        migrate=migrate,
        cleanup=cleanup,
        interactive=not no_interaction,
    )
    try:
        installer = Installer(options)
        logging.basicConfig(
            level=installer.settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        report = run_install(options, installer)
    except (EnvFileError, InstallError) as e:
        logger.debug("Install aborted", exc_info=True)
        raise click.ClickException(str(e)) from e
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration in {options.env_path}:\n{e}") from e

    if not report.changed:
        info("Nothing else needed changing.")
    info("App installation completed successfully!")
    info("Run `uvicorn starter.main:app --reload` to start the local server.")


def main():
    cli()


if __name__ == "__main__":
    main()
