"""
Command line entry point.

Usage:
    lead-enrich leads.csv -o enriched.csv --batch-size 20 --max-concurrent 5

Ctrl-C requests cancellation: rows already launched finish, no further batch
starts, and the partial results are still written.
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .logging import configure_logging, get_logger
from .models.run_config import RunConfig, validate_api_key
from .pipeline.orchestrator import BatchOrchestrator, CancellationToken, ProgressEvent, RunResult
from .pipeline.scoring import is_qualified, summarize_results
from .tabular import read_rows, validate_rows, write_results

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lead-enrich',
        description='Enrich lead rows with contact extraction, confidence scores and classification.',
    )
    parser.add_argument('input', type=Path, help='CSV file with url and snippet/description columns')
    parser.add_argument(
        '-o',
        '--output',
        type=Path,
        default=None,
        help='Results CSV (default: <input>-enriched.csv)',
    )
    parser.add_argument('--batch-size', type=int, default=None)
    parser.add_argument('--max-concurrent', type=int, default=None)
    parser.add_argument('--retry-attempts', type=int, default=None)
    parser.add_argument('--model', default=None, help='OpenAI chat model')
    parser.add_argument('--temperature', type=float, default=None)
    parser.add_argument(
        '--include-rejected',
        action='store_true',
        help='Also export leads below the minimum confidence threshold',
    )
    parser.add_argument('--json-logs', action='store_true', help='Emit JSON log lines')
    parser.add_argument('--log-level', default=None)
    return parser


def build_run_config(args: argparse.Namespace) -> RunConfig:
    """Environment-backed RunConfig with command line overrides applied."""
    base = RunConfig()
    openai = base.openai.model_dump()
    processing = base.processing.model_dump()

    if args.model is not None:
        openai['model'] = args.model
    if args.temperature is not None:
        openai['temperature'] = args.temperature
    if args.batch_size is not None:
        processing['batch_size'] = args.batch_size
    if args.max_concurrent is not None:
        processing['max_concurrent'] = args.max_concurrent
    if args.retry_attempts is not None:
        processing['retry_attempts'] = args.retry_attempts

    return RunConfig(
        openai=openai,
        processing=processing,
        scoring=base.scoring,
    )


def _log_progress(event: ProgressEvent) -> None:
    logger.info(
        'cli.progress',
        processed=event.processed,
        total=event.total,
        percent=round(event.fraction * 100),
        results=len(event.results),
        errors=len(event.errors),
        current_url=event.current_url,
    )


async def run_enrichment(
    rows: list,
    run_config: RunConfig,
    cancel_token: CancellationToken,
) -> RunResult:
    orchestrator = BatchOrchestrator.from_config(run_config, on_progress=_log_progress)
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_token.cancel)
    except (NotImplementedError, RuntimeError):
        # Signal handlers are unavailable on some platforms / non-main threads
        pass

    try:
        return await orchestrator.run(rows, cancel_token)
    finally:
        if orchestrator.classifier.openai is not None:
            await orchestrator.classifier.openai.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(json_output=args.json_logs, log_level=args.log_level)

    try:
        run_config = build_run_config(args)
    except PydanticValidationError as e:
        logger.error('cli.invalid_config', error=str(e))
        return 2

    if not run_config.has_api_key:
        logger.warning('cli.no_api_key', detail='classifying with fallback rules only')
    elif not validate_api_key(run_config.openai.api_key.get_secret_value()):
        logger.warning('cli.api_key_format', detail='OpenAI API key looks malformed')

    try:
        rows = read_rows(args.input)
        validate_rows(rows)
    except (OSError, ValidationError) as e:
        logger.error('cli.invalid_input', path=str(args.input), error=str(e))
        return 2

    logger.info('cli.config', rows=len(rows), **run_config.sanitized())

    run = asyncio.run(run_enrichment(rows, run_config, CancellationToken()))

    thresholds = run_config.scoring.thresholds
    stats = summarize_results(run.results, run.errors, thresholds, total=len(rows))
    exported = [
        r for r in run.ordered_results() if args.include_rejected or is_qualified(r, thresholds)
    ]
    output = args.output or args.input.with_name(f'{args.input.stem}-enriched.csv')
    write_results(output, exported)

    logger.info(
        'cli.done',
        status=run.status.value,
        output=str(output),
        exported=len(exported),
        **stats.to_dict(),
    )
    for error in run.errors:
        logger.warning('cli.row_error', detail=str(error))

    return 130 if run.cancelled else 0


if __name__ == '__main__':
    sys.exit(main())
