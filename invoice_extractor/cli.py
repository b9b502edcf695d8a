"""CLI interface for invoice extraction"""
import json
import sys
import time
import traceback
from pathlib import Path
from typing import Dict, Optional

import click

from . import config
from .errors import InvoiceExtractionError, ProcessingError, SchemaValidationError
from .extractor import InvoiceExtractor
from .llm_client import ServiceHandle, create_service
from .logging_config import setup_logging
from .storage import JsonDirectoryStore


def process_pdf_file(extractor: InvoiceExtractor,
                     pdf_path: Path,
                     verbose: bool = False) -> Dict:
    """Process a single PDF file and return its outcome as a JSON-ready dict"""
    click.echo(f"Processing: {pdf_path.name}")

    size = pdf_path.stat().st_size
    if size > config.MAX_FILE_SIZE:
        message = f"File size too large. Maximum size is {config.MAX_FILE_SIZE} bytes."
        click.echo(f"  Skipped: {message}", err=True)
        return {"success": False, "error": message, "kind": "file_too_large"}

    start_ts = time.perf_counter()
    try:
        record = extractor.extract_file(pdf_path)
    except InvoiceExtractionError as e:
        elapsed_s = time.perf_counter() - start_ts
        click.echo(f"  Failed ({e.kind.value}) after {elapsed_s:.2f}s: {e.message}", err=True)
        if isinstance(e, SchemaValidationError):
            for violation in e.violations:
                click.echo(f"    - {violation}", err=True)
        if verbose:
            traceback.print_exc()
        return e.to_dict()
    except Exception as e:
        # Keep the batch going; the outcome is recorded like any other failure
        error = ProcessingError(f"Error processing PDF: {e}")
        click.echo(f"  Failed ({error.kind.value}): {error.message}", err=True)
        if verbose:
            traceback.print_exc()
        return error.to_dict()

    elapsed_s = time.perf_counter() - start_ts
    click.echo(f"  Invoice {record.invoice_number} from {record.vendor} "
               f"({len(record.items)} item(s), total {record.total}) | Time: {elapsed_s:.2f}s")

    if verbose:
        click.echo(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))

    return {"success": True, "data": record.to_dict()}


@click.command()
@click.argument('pdf_folder', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--output-dir', '-o',
              type=click.Path(file_okay=False, path_type=Path),
              help='Directory to save accepted invoices (with their raw text)')
@click.option('--provider', '-p',
              type=click.Choice(['openai', 'gemini'], case_sensitive=False),
              help='Generation service to use (default: LLM_PROVIDER)')
@click.option('--verbose', '-v', is_flag=True,
              help='Verbose output')
def main(pdf_folder: Path, output_dir: Optional[Path], provider: Optional[str], verbose: bool):
    """
    Extract structured invoice records from the PDFs in a folder.

    PDF_FOLDER: Folder containing PDF invoices to process

    Examples:

    \b
    invoice-extract /path/to/invoices --output-dir results
    invoice-extract /path/to/invoices --provider gemini -v
    """
    setup_logging("DEBUG" if verbose else config.LOG_LEVEL)

    pdf_files = sorted(pdf_folder.glob('*.pdf'))
    if not pdf_files:
        click.echo(f"No PDF files found in {pdf_folder}", err=True)
        return

    click.echo(f"Found {len(pdf_files)} PDF file(s)")

    store = JsonDirectoryStore(output_dir) if output_dir else None
    if provider:
        extractor = InvoiceExtractor(service=ServiceHandle(lambda: create_service(provider)), store=store)
    else:
        extractor = InvoiceExtractor(store=store)

    all_results = {}
    for pdf_file in pdf_files:
        all_results[pdf_file.name] = process_pdf_file(extractor, pdf_file, verbose)

    succeeded = sum(1 for result in all_results.values() if result["success"])
    failed = len(all_results) - succeeded
    click.echo(f"\nProcessed {succeeded} of {len(all_results)} PDF(s) successfully")

    if output_dir:
        combined_path = output_dir / "all_invoices.json"
        with open(combined_path, 'w', encoding='utf-8') as f:
            json.dump(all_results, f, indent=2, ensure_ascii=False)
        click.echo(f"Combined results saved to: {combined_path}")

    if failed:
        sys.exit(1)


if __name__ == '__main__':
    main()
