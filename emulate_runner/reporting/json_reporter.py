"""JSON report generator for test sessions.

Generates structured JSON reports from collected test results.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..runner.result_collector import CollectedResult


class JsonReporter:
    """Generates JSON reports from collected test results."""

    def generate(
        self,
        result: CollectedResult,
        duration_ms: int = 0,
        error: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate a JSON report from test results.

        Args:
            result: Results collected across every profile iteration.
            duration_ms: Session duration in milliseconds.
            error: Overall error message if the session failed.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        all_passed = result.all_passed and error is None

        report = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": "passed" if all_passed else "failed",
            "summary": {
                "total": result.total_count,
                "passed": result.passed_count,
                "failed": result.failed_count,
                "duration_ms": duration_ms,
            },
            "profiles": [
                {
                    "profile": profile,
                    "total": len(tests),
                    "passed": sum(1 for t in tests if t.passed),
                    "failed": sum(1 for t in tests if not t.passed),
                }
                for profile, tests in result.by_profile().items()
            ],
            "tests": [
                {
                    "path": t.path,
                    "profile": t.profile,
                    "status": "pass" if t.passed else "fail",
                    "duration_ms": t.duration_ms,
                    "error": t.error,
                }
                for t in result.tests
            ],
            "error": error,
        }

        return report

    def save(self, report: dict[str, Any], path: Path) -> Path:
        """Save report to a JSON file.

        Args:
            report: Report dictionary.
            path: Output file path.

        Returns:
            Path to the saved file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        return path

    def generate_flow_output(
        self,
        success: bool,
        report: Optional[dict[str, Any]] = None,
        report_path: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate flow CLI compatible JSON output.

        Follows the flow JSON output standard:
        {
            "success": bool,
            "command": "test",
            "data": { ... },
            "message": str
        }

        Args:
            success: Aggregate session result.
            report: Session report, if the host produced one.
            report_path: Path where report was saved.

        Returns:
            Flow-compatible JSON output.
        """
        data: dict[str, Any] = {}

        if report:
            summary = report["summary"]
            data.update({
                "total_tests": summary["total"],
                "passed": summary["passed"],
                "failed": summary["failed"],
                "duration_ms": summary["duration_ms"],
                "profiles": [p["profile"] for p in report["profiles"]],
            })

        if report_path:
            data["report_path"] = report_path

        if success:
            message = "All tests passed"
        elif report and report["summary"]["failed"]:
            summary = report["summary"]
            message = f"{summary['failed']} of {summary['total']} test runs failed"
        else:
            message = "Test session failed"

        return {
            "success": success,
            "command": "test",
            "data": data or None,
            "message": message,
        }
