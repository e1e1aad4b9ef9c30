"""Entry point for the ecs-deploy command."""

import click

from ecs_deploy import __version__
from ecs_deploy.cli.commands.deploy import run, status
from ecs_deploy.config.env_loader import load_working_dir_dotenv


@click.group(name="ecs-deploy", invoke_without_command=True)
@click.version_option(version=__version__, prog_name="ecs-deploy")
@click.pass_context
def main(ctx: click.Context) -> None:
    """Deploy to ECS by given service and cluster, updating only image and env vars.

    Subcommands:

        run     Register a new task definition and update the service
        status  Show the deployments of a service
    """
    ctx.ensure_object(dict)

    # Runs before subcommand options, so .env can supply PLUGIN_* and AWS_* values
    load_working_dir_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


main.add_command(run)
main.add_command(status)


if __name__ == "__main__":
    main()
