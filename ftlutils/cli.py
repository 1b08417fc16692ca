import functools
import logging
from pathlib import Path

import click
import tomli

from .daemon.ftl import (
    FTLCommandBackend,
    FTLConfigError,
    FTLNotFound,
    get_ftl_config_value,
    set_ftl_config_value,
)
from .daemon.pidfile import get_pid_file_path, read_pid
from .models import ConfigValueResult, KeyEditResult, PidFileResult, PidResult
from .output.formatters import format_output
from .utils.config import (
    LOG_LEVELS,
    get_config_path,
    get_ftl_command,
    get_log_level,
    load_config,
    save_config,
    set_config_value,
)
from .utils.keyval import add_key, add_or_edit_key_value, remove_key


class OrderedGroup(click.Group):
    def __init__(self, *args, commands_order: list[str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.commands_order = commands_order or []

    def list_commands(self, ctx):
        commands = super().list_commands(ctx)
        if self.commands_order:
            ordered = [c for c in self.commands_order if c in commands]
            remaining = [c for c in commands if c not in self.commands_order]
            return ordered + remaining
        return commands


def handle_errors(f):
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (FTLConfigError, FTLNotFound, ValueError) as e:
            raise click.ClickException(str(e)) from e
        except OSError as e:
            raise click.ClickException(f"{e.strerror or e}: {e.filename}" if e.filename else str(e)) from e
    return wrapper


def load_settings():
    try:
        return load_config()
    except tomli.TOMLDecodeError as e:
        raise click.ClickException(f"Invalid config file {get_config_path()}: {e}") from e


def echo_result(ctx, result) -> None:
    click.echo(format_output(result, "json" if ctx.obj["json"] else "plain"))


CLI_HELP = """\
Edit pihole style config files, read the FTL PID and proxy FTL settings.

Key/value files are edited in place, one `key=value` per line:

  ftlutils add-or-edit /etc/pihole/setupVars.conf BLOCKING_ENABLED true
  ftlutils remove-key /etc/pihole/setupVars.conf PIHOLE_DNS_1

`ftlutils pid` prints -1 when no valid PID is available.
"""


@click.group(
    cls=OrderedGroup,
    commands_order=[
        "add-or-edit",
        "add-key",
        "remove-key",
        "pid-file",
        "pid",
        "ftl-config",
        "config",
    ],
    help=CLI_HELP,
    context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120},
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (default: from config, else warning)",
)
@click.pass_context
def cli(ctx, json_output, log_level):
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output

    if log_level:
        level = getattr(logging, log_level.upper())
    else:
        try:
            level = get_log_level(load_config())
        except tomli.TOMLDecodeError:
            # Commands that need the settings report the broken file themselves.
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command("add-or-edit")
@click.argument("file", type=click.Path(dir_okay=False))
@click.argument("key")
@click.argument("value")
@click.pass_context
@handle_errors
def add_or_edit_cmd(ctx, file, key, value):
    """Set KEY=VALUE in FILE, replacing any existing KEY= line."""
    add_or_edit_key_value(file, key, value)
    echo_result(ctx, KeyEditResult(file=file, key=key, value=value))


@cli.command("add-key")
@click.argument("file", type=click.Path(dir_okay=False))
@click.argument("key")
@click.pass_context
@handle_errors
def add_key_cmd(ctx, file, key):
    """Append KEY as a bare line to FILE unless a line already starts with it."""
    added = add_key(file, key)
    echo_result(ctx, KeyEditResult(file=file, key=key, changed=added))


@cli.command("remove-key")
@click.argument("file", type=click.Path(dir_okay=False))
@click.argument("key")
@click.option("--exact", is_flag=True, help="Only remove KEY and KEY=... lines, not longer keys")
@click.pass_context
@handle_errors
def remove_key_cmd(ctx, file, key, exact):
    """Delete every line of FILE starting with KEY.

    Without --exact this is a prefix match: removing PIHOLE_DNS_1 also removes
    PIHOLE_DNS_10.
    """
    removed = remove_key(file, key, exact=exact)
    echo_result(ctx, KeyEditResult(file=file, key=key, changed=removed > 0, removed=removed))


def resolve_pid_file(config) -> Path:
    paths = config.get("paths", {})
    return get_pid_file_path(paths["ftl_conf"], paths["default_pid_file"])


@cli.command("pid-file")
@click.pass_context
@handle_errors
def pid_file_cmd(ctx):
    """Print the path of FTL's PID file."""
    echo_result(ctx, PidFileResult(pid_file=str(resolve_pid_file(load_settings()))))


@cli.command("pid")
@click.argument("pid_file", type=click.Path(dir_okay=False), required=False)
@click.pass_context
@handle_errors
def pid_cmd(ctx, pid_file):
    """Print FTL's PID, or -1 if PID_FILE is missing or invalid.

    PID_FILE defaults to the path printed by `ftlutils pid-file`.
    """
    path = Path(pid_file) if pid_file else resolve_pid_file(load_settings())
    echo_result(ctx, PidResult(pid_file=str(path), pid=read_pid(path)))


@cli.group("ftl-config")
@click.pass_context
def ftl_config(ctx):
    """Read and write FTL settings via `pihole-FTL --config`."""
    ctx.obj["backend"] = FTLCommandBackend(get_ftl_command(load_settings()))


@ftl_config.command("get")
@click.argument("key")
@click.pass_context
@handle_errors
def ftl_config_get(ctx, key):
    """Print the value of KEY, e.g. dns.piholePTR."""
    value = get_ftl_config_value(key, ctx.obj["backend"])
    echo_result(ctx, ConfigValueResult(key=key, value=value))


@ftl_config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
@handle_errors
def ftl_config_set(ctx, key, value):
    """Set KEY to VALUE.

    \b
    Quote complex values as a single argument:
      ftlutils ftl-config set dns.upstreams '[ "8.8.8.8" , "8.8.4.4" ]'
    """
    ok = set_ftl_config_value(key, value, ctx.obj["backend"])
    if not ok:
        raise click.ClickException(f"Failed to set {key}")
    if ctx.obj["json"]:
        echo_result(ctx, ConfigValueResult(key=key, value=value))


@cli.group()
@click.pass_context
def config(ctx):
    """Manage ftlutils settings."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Print config file location and contents."""
    config_path = get_config_path()
    click.echo(f"Config file: {config_path}")
    click.echo()

    if config_path.exists():
        click.echo(config_path.read_text())
    else:
        click.echo("(file does not exist, using defaults)")


@config.command("set")
@click.argument("name")
@click.argument("value")
@click.pass_context
@handle_errors
def config_set(ctx, name, value):
    """Set a setting, e.g. paths.ftl_conf, ftl.command or logging.level."""
    config = load_settings()
    set_config_value(config, name, value)
    save_config(config)
    click.echo(f"Set {name} in {get_config_path()}")


if __name__ == "__main__":
    cli()
