"""Tests for the end-to-end report: generate_report wiring, POST /api/v1/reports and the CLI."""

import json
import os
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import httpx
from fastapi.testclient import TestClient

from vulnreport.core.config import Settings, get_settings
from vulnreport.main import app
from vulnreport.report import main as cli_main
from vulnreport.schemas.coverity import Results
from vulnreport.schemas.occurrence import RawOccurrence
from vulnreport.services.bundle import assemble
from vulnreport.services.errors import (
    NoAffectedPackagesError,
    OccurrenceStreamError,
    ReportError,
    TagNotFoundError,
)
from vulnreport.services.report import generate_report

TAGS_BODY = {"manifest": {"sha256:bbb": {"tag": ["master"]}}}
OCCURRENCE = {
    "name": "projects/dev-vml-cm/occurrences/occ-1",
    "kind": "VULNERABILITY",
    "vulnerability": {
        "shortDescription": "CVE-2020-1967",
        "longDescription": "Segmentation fault.",
        "packageIssue": [
            {
                "affectedLocation": {"cpeUri": "cpe:/a:openssl", "package": "openssl", "version": {"name": "1.1.1"}},
                "severityName": "HIGH",
            }
        ],
        "relatedUrls": [{"url": "https://nvd.nist.gov/vuln/detail/CVE-2020-1967", "label": "NVD"}],
    },
}


def _settings(evidence_dir: str) -> Settings:
    return Settings(EVIDENCE_DIR=evidence_dir, _env_file=None)


def _gcp_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/tags/list"):
        return httpx.Response(200, json=TAGS_BODY)
    return httpx.Response(200, json={"occurrences": [OCCURRENCE]})


class TestGenerateReport(unittest.TestCase):
    """generate_report resolves the image, lists occurrences and assembles the bundle."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.evidence_dir = os.path.join(self._tmp.name, "evidence")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_end_to_end(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _gcp_handler(request)

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            results = generate_report(
                _settings(self.evidence_dir),
                service="ssn-pdfservice",
                client=client,
                token_provider=lambda: "tok",
            )
        self.assertEqual(len(results.issues), 1)
        self.assertEqual(results.issues[0].properties.impact, "High")
        self.assertTrue(os.path.isdir(self.evidence_dir))
        self.assertEqual(len(os.listdir(self.evidence_dir)), 2)
        self.assertEqual(str(seen[0].url), "https://eu.gcr.io/v2/dev-vml-cm/ssn-pdfservice/tags/list")
        self.assertEqual(
            seen[1].url.params["filter"],
            'resourceUrl = "https://eu.gcr.io/dev-vml-cm/ssn-pdfservice@sha256:bbb" kind = "VULNERABILITY"',
        )

    def test_service_required(self) -> None:
        with self.assertRaises(ReportError) as ctx:
            generate_report(_settings(self.evidence_dir), service="  ", token_provider=lambda: "tok")
        self.assertEqual(ctx.exception.message, "service must be set")

    def test_tag_not_found(self) -> None:
        with httpx.Client(transport=httpx.MockTransport(_gcp_handler)) as client:
            with self.assertRaises(TagNotFoundError):
                generate_report(
                    _settings(self.evidence_dir),
                    service="ssn-pdfservice",
                    tag="release",
                    client=client,
                    token_provider=lambda: "tok",
                )

    def test_overrides_settings_defaults(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path.endswith("/tags/list"):
                return httpx.Response(200, json={"manifest": {"sha256:ddd": {"tag": ["v2"]}}})
            return httpx.Response(200, json={})

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            results = generate_report(
                _settings(self.evidence_dir),
                service="api",
                project="other",
                root="us.gcr.io",
                tag="v2",
                client=client,
                token_provider=lambda: "tok",
            )
        self.assertEqual(results.issues, [])
        self.assertEqual(str(seen[0].url), "https://us.gcr.io/v2/other/api/tags/list")
        self.assertEqual(seen[1].url.path, "/v1beta1/projects/other/occurrences")


class TestReportsEndpoint(unittest.TestCase):
    """POST /api/v1/reports returns the bundle or maps failures to HTTP errors."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        app.dependency_overrides[get_settings] = lambda: _settings(self._tmp.name)
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self._tmp.cleanup()

    def test_success_uses_importer_field_names(self) -> None:
        results = assemble([RawOccurrence.model_validate(OCCURRENCE)], self._tmp.name)
        with patch("vulnreport.api.v1.reports.generate_report", return_value=results) as gen:
            resp = self.client.post("/api/v1/reports/", json={"service": "ssn-pdfservice", "tag": "master"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["header"]["format"], "cov-import-results input")
        self.assertIn("longDescription", body["issues"][0]["properties"])
        self.assertIn("linkUrl", body["issues"][0]["events"][0])
        self.assertEqual(gen.call_args.kwargs["service"], "ssn-pdfservice")
        self.assertEqual(gen.call_args.kwargs["tag"], "master")

    def test_tag_not_found_is_404(self) -> None:
        err = TagNotFoundError("did not find tag 'x' for service 'svc'")
        with patch("vulnreport.api.v1.reports.generate_report", side_effect=err):
            resp = self.client.post("/api/v1/reports/", json={"service": "svc", "tag": "x"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], err.message)

    def test_rejected_record_is_422(self) -> None:
        with patch(
            "vulnreport.api.v1.reports.generate_report",
            side_effect=NoAffectedPackagesError("only vulnerable packages can be converted"),
        ):
            resp = self.client.post("/api/v1/reports/", json={"service": "svc"})
        self.assertEqual(resp.status_code, 422)

    def test_stream_error_is_502(self) -> None:
        with patch(
            "vulnreport.api.v1.reports.generate_report",
            side_effect=OccurrenceStreamError("Container Analysis returned 500: boom", 500),
        ):
            resp = self.client.post("/api/v1/reports/", json={"service": "svc"})
        self.assertEqual(resp.status_code, 502)

    def test_blank_service_rejected(self) -> None:
        resp = self.client.post("/api/v1/reports/", json={"service": "   "})
        self.assertEqual(resp.status_code, 422)

    def test_health(self) -> None:
        resp = self.client.get("/api/v1/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")

    def test_no_cross_origin_headers(self) -> None:
        resp = self.client.get("/api/v1/health/", headers={"Origin": "https://evil.example"})
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("access-control-allow-origin", resp.headers)
        self.assertNotIn("access-control-allow-credentials", resp.headers)


class TestCli(unittest.TestCase):
    """python -m vulnreport.report writes the bundle and returns an exit code."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_writes_output_file(self) -> None:
        out = os.path.join(self._tmp.name, "results.json")
        gen = MagicMock(return_value=Results())
        with patch("vulnreport.report.generate_report", gen):
            code = cli_main(["--service", "svc", "--output", out, "--evidence-dir", self._tmp.name])
        self.assertEqual(code, 0)
        with open(out, encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(data["issues"], [])
        self.assertEqual(gen.call_args.kwargs["evidence_dir"], self._tmp.name)
        self.assertEqual(gen.call_args.kwargs["service"], "svc")

    def test_failure_returns_one(self) -> None:
        with patch("vulnreport.report.generate_report", side_effect=ReportError("service must be set")):
            code = cli_main([])
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
