from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from ipcount.config import DEFAULT_INPUT_FILENAME, CountConfig
from ipcount.datasources.text_lines import iter_lines
from ipcount.processing.counter import AddressCounter
from ipcount.processing.snapshot import snapshot_dataframe
from ipcount.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Count distinct IPv4/IPv6 addresses in a line-delimited text file.")

log = get_logger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _export_diagnostics(
        counter: AddressCounter,
        dump_table: bool,
        table_csv: Optional[Path],
        heatmap: Optional[Path],
) -> None:
    """
    Write the optional table dump, CSV and /16 heatmap for a finished run.
    """
    if not (dump_table or table_csv or heatmap):
        return

    df = snapshot_dataframe(counter)

    if dump_table:
        if df.empty:
            typer.echo("Dedup table is empty.")
        else:
            typer.echo(df.to_string(index=False))

    if table_csv is not None:
        from ipcount.viz.export import save_csv

        save_csv(df, table_csv.expanduser().resolve())

    if heatmap is not None:
        from ipcount.viz.heatmap import build_16_heatmap
        from ipcount.viz.export import save_html

        output = heatmap.expanduser().resolve()
        if output.suffix.lower() not in (".html", ".htm"):
            output = output.with_suffix(".html")
        save_html(build_16_heatmap(df), output)
        typer.echo(f"Wrote heatmap to {output}")


@app.command()
def count(
        input: Path = typer.Argument(
            Path(DEFAULT_INPUT_FILENAME),
            help="Text file with one address per line.",
        ),
        track_ports: bool = typer.Option(
            True,
            "--ports/--no-ports",
            help="Count the same address with different ports as different entries.",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-V",
            help="Log each newly counted address (up to --verbose-limit).",
        ),
        verbose_limit: int = typer.Option(
            10,
            "--verbose-limit",
            min=0,
            help="Stop echoing new addresses after this many (0 = never stop).",
        ),
        dump_table: bool = typer.Option(
            False,
            "--dump-table",
            help="Print the dedup table (node, four 64-bit words) after counting.",
        ),
        table_csv: Optional[Path] = typer.Option(
            None,
            "--table-csv",
            help="Write the dedup table to a CSV file.",
        ),
        heatmap: Optional[Path] = typer.Option(
            None,
            "--heatmap",
            help="Write an HTML heatmap of unique IPv4 addresses per /16.",
        ),
        encoding: str = typer.Option(
            "utf-8",
            "--encoding",
            help="Encoding of the input file.",
        ),
        log_level: str = typer.Option(
            "WARNING",
            "--log-level",
            help="DEBUG | INFO | WARNING | ERROR",
        ),
):
    """
    Count unique addresses in INPUT (default: ips-list.txt).

    Example:

        ipcount ips-list.txt
        ipcount ips-list.txt --no-ports --dump-table
        ipcount big.txt --heatmap map.html
    """
    log_level = log_level.upper()
    if log_level not in LOG_LEVELS:
        raise typer.BadParameter(f"Unsupported log level: {log_level}")

    # --verbose output goes through the log, so it needs at least INFO
    configure_logging("INFO" if verbose and log_level in ("WARNING", "ERROR") else log_level)

    config = CountConfig(
        input_path=input,
        track_ports=track_ports,
        verbose=verbose,
        verbose_limit=verbose_limit,
        encoding=encoding,
    )
    input_path = config.input_path.expanduser()
    if not input_path.is_file():
        typer.echo(
            f"File {input_path} does not exist. Pass the input file name on the command line.",
            err=True,
        )
        raise typer.Exit(code=1)

    counter = AddressCounter(config)
    failed = False
    try:
        counter.process_lines(iter_lines(input_path, encoding=config.encoding))
    except (OSError, UnicodeDecodeError) as e:
        failed = True
        log.error("Reading %s failed after %d lines: %s", input_path, counter.stats.lines, e)
        typer.echo(f"Fatal error: {e}", err=True)
    except Exception as e:
        failed = True
        log.exception("Counting %s failed after %d lines", input_path, counter.stats.lines)
        typer.echo(f"Fatal error: {e!r}", err=True)
    finally:
        stats = counter.stats
        log.info(
            "Lines: %d, rejected: %d, duplicates: %d, nodes: %d",
            stats.lines, stats.rejected, stats.duplicates, counter.nodes,
        )
        typer.echo(f"Unique addresses: {counter.unique_count}")

    _export_diagnostics(counter, dump_table, table_csv, heatmap)

    if failed:
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for console_scripts."""
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Interrupted by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
