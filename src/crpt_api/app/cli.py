from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path

import typer
from pydantic import ValidationError

from .api import CrptApiClient
from ..core.errors import CancellationError, ConfigurationError, CrptApiError
from ..infra.schemas import Document, Product


app = typer.Typer(add_completion=False, help="CRPT API client with a fixed-window rate limit")


class LogLevel(str, Enum):
    OFF = "OFF"          # special value: disable logging
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


@app.callback()
def main(
    log_level: LogLevel | None = typer.Option(
        None,
        "--log-level",
        case_sensitive=False,
        help="Set log level (OFF, CRITICAL, ERROR, WARNING, INFO, DEBUG). Default: OFF",
    ),
) -> None:
    """Root command callback to configure logging if requested."""
    if log_level in (None, LogLevel.OFF):
        return

    logger = logging.getLogger(__package__.split(".", 1)[0] if __package__ else "crpt_api")

    # Avoid stacking console handlers on repeated invocations
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s | %(threadName)s | %(name)s | %(message)s"))
        logger.addHandler(handler)

    logger.propagate = False
    logger.setLevel(getattr(logging, log_level.value))


def sample_document() -> Document:
    """Demo document with a single product."""
    product = Product(
        certificate_document="cert_doc",
        certificate_document_date="2020-01-23",
        certificate_document_number="cert_num",
        owner_inn="owner_inn",
        producer_inn="producer_inn",
        production_date="2020-01-23",
        tnved_code="tnved_code",
        uit_code="uit_code",
        uitu_code="uitu_code",
    )
    return Document(
        description='{"participantInn": "1234567890"}',
        doc_id="doc_id",
        doc_status="doc_status",
        doc_type="LP_INTRODUCE_GOODS",
        import_request=True,
        owner_inn="owner_inn",
        participant_inn="participant_inn",
        producer_inn="producer_inn",
        production_date="2020-01-23",
        production_type="production_type",
        products=[product],
        reg_date="2020-01-23",
        reg_number="reg_number",
    )


@app.command(help="Print a sample document in the wire format (camelCase JSON).")
def sample() -> None:
    print(json.dumps(sample_document().to_payload(), ensure_ascii=False, indent=2))


@app.command(help="Submit the document in FILE, REPEAT times, honouring the rate limit.")
def create(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Document JSON file"),
    signature: str = typer.Option(..., "--signature", "-s", help="Document signature (sent as the Signature header)"),
    repeat: int = typer.Option(1, "--repeat", "-n", min=1, help="Number of times to submit the document"),
    request_limit: int | None = typer.Option(None, help="Requests per interval (default: CRPT_API_REQUEST_LIMIT or 10)"),
    interval_seconds: float | None = typer.Option(None, help="Interval length in seconds (default: CRPT_API_INTERVAL_SECONDS or 1)"),
) -> None:
    try:
        document = Document.model_validate_json(file.read_text(encoding="utf-8"))
    except ValidationError as e:
        typer.echo(f"Invalid document: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        with CrptApiClient(interval_seconds=interval_seconds, request_limit=request_limit) as client:
            for _ in range(repeat):
                data = client.create_document(document, signature)
                print(json.dumps(data, ensure_ascii=False))
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)
    except (CrptApiError, CancellationError) as e:
        typer.echo(f"Error creating document: {e}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
