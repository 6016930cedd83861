"""Fold a stream of occurrences into one cov-import-results bundle."""

import logging
import os
from collections.abc import Iterable

from pydantic import ValidationError

from vulnreport.schemas.coverity import Header, Results
from vulnreport.schemas.occurrence import RawOccurrence
from vulnreport.services.classifier import classify
from vulnreport.services.errors import ResultsEncodeError
from vulnreport.services.issue_mapper import map_occurrence

logger = logging.getLogger(__name__)


def _remove_created(paths: list[str]) -> None:
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning("Could not remove evidence file %s: %s", path, e)


def assemble(occurrences: Iterable[RawOccurrence], base_dir: str) -> Results:
    """
    Pull occurrences one at a time, classify and map each, and collect issues and sources.

    Stops at the first failure and re-raises it (classifier rejection, evidence write error,
    or an error raised by the stream itself). Evidence files this pass created are removed
    before re-raising; files that existed before the pass (e.g. from an earlier run whose
    bundle still references them) are kept.
    """
    results = Results(header=Header(), sources=[], issues=[])
    created: list[str] = []
    try:
        for record in occurrences:
            package = classify(record)
            mapped = map_occurrence(record, package, base_dir)
            created.extend(mapped.created_paths)
            results.issues.append(mapped.issue)
            results.sources.append(mapped.source)
    except Exception:
        _remove_created(created)
        raise

    logger.info(
        "Bundle assembled",
        extra={"issue_count": len(results.issues), "source_count": len(results.sources)},
    )
    return results


def encode_results(results: Results) -> str:
    """Serialize the bundle; raises ResultsEncodeError on failure."""
    try:
        return results.to_json()
    except (ValidationError, ValueError, TypeError) as e:
        raise ResultsEncodeError(f"cannot encode results: {e}") from e


def write_results(results: Results, path: str) -> None:
    """Write the serialized bundle to path; raises ResultsEncodeError on encode or I/O failure."""
    payload = encode_results(results)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload)
            f.write("\n")
    except OSError as e:
        raise ResultsEncodeError(f"cannot write results to {path}: {e}") from e
