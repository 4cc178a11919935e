from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from molsoup.config import load_settings
from molsoup.core.logging_utils import configure_logging, get_logger
from molsoup.core.table import StructureTable
from molsoup.parsers.dataset import format_for_path, iter_structure_files, load_structure
from molsoup.parsers.secondary import SecondaryStructureRange
from molsoup.store.soup import Soup

logger = get_logger(__name__)
app = typer.Typer(no_args_is_help=True)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Log level (default: MOLSOUP_LOG_LEVEL or INFO)."),
):
    """Parse PDB and mmCIF structure files."""
    configure_logging(log_level or load_settings().log_level)


@app.command("info")
def info(
    path: Path = typer.Argument(..., help="PDB or mmCIF file (optionally gzipped)."),
    structure_id: Optional[str] = typer.Option(None, help="Structure id (default: file name stem)."),
    show_ss: bool = typer.Option(False, help="Print the per-residue secondary structure string."),
    show_unmatched: bool = typer.Option(False, help="List secondary-structure ranges whose start residue is missing."),
):
    """Parse one file and print a summary per structure."""
    if not path.is_file():
        raise typer.BadParameter(f"File not found: {path}")
    if format_for_path(path) is None:
        logger.info("Unknown extension for %s, sniffing content", path)

    unmatched: list[SecondaryStructureRange] = []
    soup = Soup()
    report = load_structure(path, store=soup, structure_id=structure_id, on_unmatched=unmatched.append)

    for i_structure in range(len(soup.structures)):
        s = soup.summary(i_structure)
        typer.echo(
            f"{s['structure_id']}\t{s['title'].strip()}\tchains={s['chain_count']} "
            f"residues={s['residue_count']} atoms={s['atom_count']} "
            f"helix={s['helix_residue_count']} sheet={s['sheet_residue_count']}"
        )
        if show_ss:
            typer.echo(soup.ss_string(i_structure))
    if not report.has_secondary_structure:
        typer.echo("no secondary structure records")
    if show_unmatched:
        for r in unmatched:
            typer.echo(f"unmatched {r.ss} {r.chain}:{r.start}-{r.end}")
    for error in report.errors:
        typer.echo(f"error: {error}", err=True)
    if not report.structure_ids:
        raise typer.Exit(code=1)


@app.command("scan")
def scan(
    directory: Path = typer.Argument(..., help="Directory searched recursively."),
    out: Path = typer.Option(..., help="Output summary table (parquet)."),
    pattern: Optional[str] = typer.Option(None, help="Glob pattern (default: MOLSOUP_SCAN_PATTERN)."),
):
    """Parse every structure file under a directory into one summary table."""
    from tqdm import tqdm

    if not directory.is_dir():
        raise typer.BadParameter(f"Not a directory: {directory}")
    settings = load_settings()
    paths = list(iter_structure_files(directory, pattern=pattern, settings=settings))

    tables = []
    n_failed = 0
    for path in tqdm(paths, desc="parse", unit="file"):
        soup = Soup()
        report = load_structure(path, store=soup, settings=settings)
        if not report.structure_ids:
            n_failed += 1
            continue
        tables.append(StructureTable.from_soup(soup, source=str(path)))

    table = StructureTable.concat(tables)
    table.save_parquet(out)
    logger.info(
        "Wrote %s (structures=%d atoms=%d, files without atoms=%d)",
        out, table.count(), table.atom_total(), n_failed,
    )
