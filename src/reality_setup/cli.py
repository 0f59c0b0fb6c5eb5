"""reality-setup command line interface."""

from pathlib import Path

import click
from pydantic import ValidationError

from . import __version__
from .api import build_provider, provision
from .common.exceptions import RealitySetupError
from .common.logging import setup_logging
from .identity.models import IdentityOverrides
from .protocol import ProtocolVariant
from .settings import (
    DEFAULT_DAEMON_CONFIG_PATH,
    KeyGenerator,
    OutputMode,
    ProvisionRequest,
    ProvisionSettings,
)

LOG_FILE_NAME = "setup_xray.log"


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="reality-setup")
@click.argument("server_address")
@click.option(
    "--auto-config",
    is_flag=True,
    help="Only write server and client configs to the output directory; "
    "do not touch the live Xray config or restart the service.",
)
@click.option("--uuid", "client_id", help="Client id to use instead of a generated one.")
@click.option("--private-key", help="REALITY private key (requires --public-key).")
@click.option("--public-key", help="REALITY public key (requires --private-key).")
@click.option("--short-id", help="Hex short id to use instead of a generated one.")
@click.option("--sni", "server_name", help="SNI/dest host instead of a random pick.")
@click.option("--proxy-user", help="Local proxy user (requires --proxy-pass).")
@click.option("--proxy-pass", "proxy_password", help="Local proxy password (requires --proxy-user).")
@click.option("--no-proxy-auth", is_flag=True, help="Leave the local SOCKS/HTTP listeners without auth.")
@click.option(
    "--variant",
    type=click.Choice([v.value for v in ProtocolVariant]),
    default=ProtocolVariant.NO_FLOW.value,
    show_default=True,
    help="'vision' adds flow=xtls-rprx-vision to both configs and the link.",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory for client_config.json (and server_config.json with --auto-config).",
)
@click.option("--server-template", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--client-template", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--daemon-config",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_DAEMON_CONFIG_PATH,
    show_default=True,
    help="Live Xray configuration path.",
)
@click.option("--service-name", default="xray", show_default=True)
@click.option(
    "--keygen",
    type=click.Choice([k.value for k in KeyGenerator]),
    default=KeyGenerator.X25519.value,
    show_default=True,
    help="Generate keys in-process or with 'xray x25519'.",
)
@click.option("--seed", type=int, help="Seed for the SNI pick.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.option("--json-logs", is_flag=True, help="Emit JSON log lines.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Run log path (default: <output-dir>/{LOG_FILE_NAME}).",
)
def main(
    server_address: str,
    auto_config: bool,
    client_id: str | None,
    private_key: str | None,
    public_key: str | None,
    short_id: str | None,
    server_name: str | None,
    proxy_user: str | None,
    proxy_password: str | None,
    no_proxy_auth: bool,
    variant: str,
    output_dir: Path,
    server_template: Path | None,
    client_template: Path | None,
    daemon_config: Path,
    service_name: str,
    keygen: str,
    seed: int | None,
    log_level: str,
    json_logs: bool,
    log_file: Path | None,
) -> None:
    """Provision an Xray VLESS + REALITY server for SERVER_ADDRESS."""
    output_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_file or output_dir / LOG_FILE_NAME
    if log_path.exists():
        log_path.unlink()
    setup_logging(level=log_level, json_format=json_logs, log_file=str(log_path))

    try:
        settings = ProvisionSettings(
            daemon_config_path=daemon_config,
            staging_dir=output_dir,
            server_template=server_template,
            client_template=client_template,
            service_name=service_name,
            key_generator=KeyGenerator(keygen),
        )
        request = ProvisionRequest(
            server_address=server_address,
            overrides=IdentityOverrides(
                client_id=client_id,
                private_key=private_key,
                public_key=public_key,
                short_id=short_id,
                server_name=server_name,
                proxy_user=proxy_user,
                proxy_password=proxy_password,
            ),
            variant=ProtocolVariant(variant),
            output_mode=OutputMode.STAGING if auto_config else OutputMode.LIVE,
            proxy_auth=not no_proxy_auth,
        )
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    try:
        result = provision(request, settings, provider=build_provider(settings, seed))
    except RealitySetupError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Server config: {result.server_config_path}")
    click.echo(f"Client config: {result.client_config_path}")
    click.echo("")
    click.echo(result.link)
    click.echo("")

    credential = result.identity.proxy_credential
    if credential is not None:
        click.echo(f"SOCKS5/HTTP proxy user: {credential.user}")
        click.echo(f"SOCKS5/HTTP proxy password: {credential.password}")

    if result.restart is not None and not result.restart.success:
        click.echo(f"Warning: restart {service_name} manually ({result.restart.message})", err=True)
    if auto_config:
        click.echo("Apply the generated server config to Xray manually.")
    click.echo("Make sure TCP port 443 is open in the server firewall.")


if __name__ == "__main__":
    main()
