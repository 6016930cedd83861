"""
CLI entrypoint: write the Coverity import bundle for one service image. Run e.g.:

  python -m vulnreport.report --service ssn-pdfservice --tag master \
      --output results.json --evidence-dir evidence/

Then: cov-import-results --dir idir results.json
"""

import argparse
import logging
import sys

from dotenv import load_dotenv

from vulnreport.core.config import Settings, get_settings
from vulnreport.services.bundle import encode_results, write_results
from vulnreport.services.errors import ReportError
from vulnreport.services.report import generate_report

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None, settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert Container Analysis vulnerabilities for an image into cov-import-results input."
    )
    parser.add_argument("--project", default=settings.GCP_PROJECT, help="Google Project ID")
    parser.add_argument("--root", default=settings.GCR_ROOT, help="GCR Root")
    parser.add_argument("--service", default="", help='Service to report on, ie. "ssn-pdfservice"')
    parser.add_argument("--tag", default=settings.DEFAULT_TAG, help="Docker tag to report on")
    parser.add_argument("--output", default=None, help="Results file (default: stdout)")
    parser.add_argument(
        "--evidence-dir",
        default=settings.EVIDENCE_DIR,
        help="Directory for per-issue evidence files",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Generate the report; exit code 0 on success, 1 on any failure."""
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
        stream=sys.stderr,
    )
    args = _parse_args(argv, settings)
    try:
        results = generate_report(
            settings,
            service=args.service,
            project=args.project,
            root=args.root,
            tag=args.tag,
            evidence_dir=args.evidence_dir,
        )
        if args.output:
            write_results(results, args.output)
        else:
            sys.stdout.write(encode_results(results) + "\n")
    except ReportError as e:
        logger.error("Report failed: %s", e.message)
        return 1
    logger.info("Report written: issues=%s", len(results.issues))
    return 0


if __name__ == "__main__":
    sys.exit(main())
