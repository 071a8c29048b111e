# filename : scripts.py
# created  : 10/19/2026


import logging

import click

from sdmverify.config import SdmConfig, parse_key
from sdmverify.core.base.logging import configure
from sdmverify.core.ntag424 import (
    SunResult,
    compute_sdm_mac,
    validate_plain_sun,
    verify_sun_message,
)
from sdmverify.core.ntag424.picc import encode_counter

lg = logging.getLogger(__name__)


def _hex(ctx, param, value):
    """Decode a hex option; empty or missing stays empty."""
    if not value:
        return b""
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise click.BadParameter("not valid hex") from None


def _key(ctx, param, value):
    if value is None:
        return None
    try:
        return parse_key(value, param.name)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from None


def _ctr(ctx, param, value):
    """Read counter as mirrored in a URL: 6 hex chars, most significant first."""
    if value is None:
        return None
    try:
        raw = bytes.fromhex(value)
    except ValueError:
        raise click.BadParameter("not valid hex") from None
    if len(raw) != 3:
        raise click.BadParameter("expected 3 bytes")
    return int.from_bytes(raw, "big")


def _report(ctx: click.Context, result: SunResult) -> None:
    if not result.ok:
        click.echo(f"error: {result.error.value}", err=True)
        ctx.exit(1)
    click.echo(f"uid:       {result.uid.hex().upper()}")
    if result.counter is not None:
        click.echo(f"counter:   {result.counter}")
    if result.file_data is not None:
        click.echo(f"file data: {result.file_data.hex().upper()}")


_file_data_option = click.option(
    "--enc-file-data",
    default="",
    callback=_hex,
    help="Encrypted file data (hex), enables file data mode.",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show flags and modes).")
@click.option(
    "--meta-key",
    envvar="SDM_META_KEY",
    callback=_key,
    help="SDM meta read key (hex). Overrides SDM_META_KEY.",
)
@click.option(
    "--file-key",
    envvar="SDM_FILE_KEY",
    callback=_key,
    help="SDM file read key (hex). Overrides SDM_FILE_KEY.",
)
@click.pass_context
def sdmverify(ctx, verbose, meta_key, file_key):

    configure(verbose)

    try:
        cfg = SdmConfig.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from None
    if meta_key is not None:
        cfg.meta_key = meta_key
    if file_key is not None:
        cfg.file_key = file_key
    if cfg.demo_mode:
        lg.warning("using an all-zero key, do not use in production")
    ctx.obj = cfg


@sdmverify.command()
@click.option("--picc-data", required=True, callback=_hex, help="Encrypted PICC data (hex).")
@click.option("--cmac", required=True, callback=_hex, help="SDMMAC (hex).")
@_file_data_option
@click.pass_context
def verify(ctx, picc_data, cmac, enc_file_data):
    """Decrypt and verify an encrypted-mirror SUN message."""
    cfg: SdmConfig = ctx.obj
    result = verify_sun_message(
        cfg.meta_key,
        cfg.file_key,
        picc_data,
        cmac,
        enc_file_data,
        **cfg.backend_options,
    )
    _report(ctx, result)


@sdmverify.command()
@click.option("--uid", required=True, callback=_hex, help="Mirrored UID (hex).")
@click.option("--ctr", required=True, callback=_ctr, help="Mirrored read counter (hex).")
@click.option("--cmac", required=True, callback=_hex, help="SDMMAC (hex).")
@_file_data_option
@click.pass_context
def plain(ctx, uid, ctr, cmac, enc_file_data):
    """Verify a SUN message with plaintext UID and counter."""
    cfg: SdmConfig = ctx.obj
    result = validate_plain_sun(
        cfg.file_key, uid, ctr, cmac, enc_file_data, **cfg.backend_options
    )
    _report(ctx, result)


@sdmverify.command()
@click.option("--uid", required=True, callback=_hex, help="UID (hex).")
@click.option("--ctr", default=None, callback=_ctr, help="Read counter (hex), if mirrored.")
@_file_data_option
@click.pass_context
def mac(ctx, uid, ctr, enc_file_data):
    """Compute the SDMMAC a tag would send."""
    cfg: SdmConfig = ctx.obj
    payload = uid if ctr is None else uid + encode_counter(ctr)
    click.echo(
        compute_sdm_mac(cfg.file_key, payload, enc_file_data, cfg.mac_param)
        .hex()
        .upper()
    )
