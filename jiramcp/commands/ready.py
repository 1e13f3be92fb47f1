"""List the issues of a JQL query that are ready to be picked up."""

import click

from .. import views
from ..api import JiraHTTP, UpstreamError
from ..config import defaults
from .common import cli, load_config


@cli.command("ready")
@click.argument("jql")
@click.option(
    "--max-results",
    default=defaults.SEARCH_MAX_RESULTS,
    type=int,
    help="Maximum number of issues to fetch",
)
@click.pass_context
def ready_cmd(ctx, jql, max_results):
    """Print issues whose latest comment is not 'completed' and whose
    inward linked bugs are ready for QA or closed."""
    wconfig = load_config(ctx)
    jira = JiraHTTP(wconfig)
    try:
        result = jira.search_issues(
            jql, max_results=max_results, fields=defaults.READY_FIELDS
        )
    except UpstreamError as e:
        raise click.ClickException(str(e)) from e

    lines = views.ready_issue_lines(result["issues"])
    if not lines:
        click.secho("No ready issues found", fg="yellow", err=True)
        return
    for line in lines:
        click.echo(line)
