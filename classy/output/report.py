"""
Classy Report Generator
========================

Writes an :class:`AnalysisResult` as a JSON document::

    {
      "generator": "classy 0.1.0",
      "generated_at": "...",
      "file": {"path": "...", "size": 1234, "sha256": "..."},
      "summary": { ... ClassSummary ... },
      "class_file": { ... the decoded structure, bytes as base64 ... }
    }
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from classy import __version__
from classy.core.models import AnalysisResult


class ClassyReportGenerator:
    """Produce JSON reports for decoded class files.

    Usage::

        generator = ClassyReportGenerator()
        generator.generate_json(result, "output/Main.json")
    """

    def build(self, result: AnalysisResult, *, include_structure: bool = True) -> dict[str, Any]:
        """Assemble the report mapping without writing it.

        Args:
            result:            The analysis to report on.
            include_structure: Embed the full decoded ``class_file``.
        """
        report: dict[str, Any] = {
            "generator": f"classy {__version__}",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "file": {
                "path": result.path,
                "size": result.file_size,
                "sha256": result.sha256,
                "duration": round(result.duration, 6),
            },
            "summary": result.summary.model_dump(mode="json"),
        }
        if include_structure:
            report["class_file"] = result.class_file.model_dump(mode="json")
        return report

    def to_json(self, result: AnalysisResult, *, include_structure: bool = True) -> str:
        return json.dumps(
            self.build(result, include_structure=include_structure),
            indent=2,
            ensure_ascii=False,
            default=str,
        )

    def generate_json(
        self,
        result: AnalysisResult,
        output_path: str | Path,
        *,
        include_structure: bool = True,
    ) -> Path:
        """Write the JSON report to *output_path*.

        Parent directories are created as needed.

        Returns:
            Resolved path of the written file.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(self.to_json(result, include_structure=include_structure))
            fh.write("\n")
        return path.resolve()
