"""Command-line interface for importing a screenplay file.

Accepted inputs:
- .txt: Plain extracted text (treated as a ``txt`` extraction, method ``cli``).
- .json: An extraction result object in its camelCase wire form
  (``text``, ``fileType``, ``method``, ``usedOcr``, ``warnings``, ``attempts``,
  optional ``structuredBlocks``).

Outputs written to the output directory:
- ``import.json``: the open action with classified lines (or structured blocks).
- ``review_request.json``: the agent review request (classified imports only).
- ``review.md``: Markdown QA report (classified imports only, unless ``--no-report``).

Usage (programmatic):
    from asc.pipeline import import_cli
    exit_code = import_cli.main(["script.txt", "out_dir"])
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from asc.config import load_settings
from asc.pipeline.file_open import ActionKind, ExtractionResult, FileType, ImportMode
from asc.pipeline.import_flow import ImportRunner
from asc.review.report import make_review_markdown


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="asc-import", description="Classify an extracted screenplay for the editor.")
    ap.add_argument("input", help="Path to a .txt file or an extraction-result .json")
    ap.add_argument("out_dir", help="Directory for import.json, review_request.json and review.md")
    ap.add_argument("--mode", choices=[m.value for m in ImportMode], default=ImportMode.REPLACE.value)
    ap.add_argument("--config", default=None, help="Settings YAML (optional)")
    ap.add_argument("--review-url", default=None, help="Review service base URL; overrides settings")
    ap.add_argument("--no-report", action="store_true", help="Skip writing review.md")
    return ap.parse_args(argv)


def _read_extraction(path: Path) -> ExtractionResult:
    if path.suffix.lower() == ".txt":
        return ExtractionResult(text=path.read_text(encoding="utf-8"), file_type=FileType.TXT, method="cli")
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("JSON input must be an extraction-result object")
        return ExtractionResult.from_dict(data)
    raise ValueError("Unsupported input type. Use .txt or .json.")


def _write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )


def main(argv: list[str] | None = None) -> int:
    """Run the import CLI.

    Args:
        argv: Command-line arguments. If None, ``sys.argv[1:]`` is used.
    Returns:
        Process exit code: 0 ok, 2 usage, 3 missing input, 4 bad input,
        5 write failure, 6 empty file rejected.
    """

    try:
        args = _parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code == 0 else 2

    in_path = Path(args.input)
    out_dir = Path(args.out_dir)
    if not in_path.exists() or not in_path.is_file():
        sys.stderr.write(f"Input not found: {in_path}\n")
        return 3

    try:
        extraction = _read_extraction(in_path)
        settings = load_settings(args.config)
    except (ValueError, OSError) as exc:
        sys.stderr.write(f"Failed to read input: {exc}\n")
        return 4
    if args.review_url:
        settings.review.base_url = args.review_url

    result = ImportRunner.from_settings(settings).run(extraction, args.mode)
    if result.action.kind is ActionKind.REJECT:
        sys.stderr.write(f"{result.action.notice.title}: {result.action.notice.description}\n")
        return 6

    try:
        _write_json(out_dir / "import.json", result.to_dict())
        if result.request is not None:
            _write_json(out_dir / "review_request.json", result.request.to_wire())
            if not args.no_report:
                (out_dir / "review.md").write_text(make_review_markdown(result.lines, result.outcome), encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"Failed to write outputs: {exc}\n")
        return 5

    sys.stdout.write(f"Wrote import artifacts to {out_dir} ({len(result.lines)} lines)\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
