"""Generate Markdown review reports for classified screenplays."""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from statistics import mean

from asc.classifier.types import ClassifiedLine, is_suspicious
from asc.review.protocol import MergeOutcome


@dataclass
class ReportConfig:
    """Configuration for review report formatting."""

    max_text_len: int = 120
    max_rows: int = 200
    suspicion_threshold: int = 60
    confidence_floor: float = 0.5
    show_reason_breakdown: bool = True
    show_suspicious_first: bool = True


class ReviewReporter:
    """Build a Markdown QA report from classified lines."""

    def __init__(self, config: ReportConfig | None = None) -> None:
        self.cfg = config or ReportConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def make_markdown(self, lines: Sequence[ClassifiedLine], outcome: MergeOutcome | None = None) -> str:
        """Return a Markdown report for human QA."""

        out: list[str] = ["# Classification review", ""]
        flagged = sum(1 for line in lines if self._flagged(line))
        out.append(f"*lines:* **{len(lines)}** • *suspicious:* **{flagged}**")

        out.append("")
        out.append("## Types")
        out.extend(self._type_summary(lines))

        rows = list(lines)
        if self.cfg.show_suspicious_first:
            rows.sort(key=lambda ln: (not self._flagged(ln), ln.confidence, ln.line_index))
        else:
            rows.sort(key=lambda ln: (ln.confidence, ln.line_index))
        out.append("")
        out.append("## Lines (lowest confidence first)")
        out.extend(self._lines_table(rows[: self.cfg.max_rows]))

        if self.cfg.show_reason_breakdown:
            out.append("")
            out.append("## Reasons")
            out.extend(self._reason_breakdown(lines))

        if outcome is not None:
            out.append("")
            out.append("## Agent review")
            out.extend(self._outcome_section(outcome))

        return "\n".join(out) + "\n"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _flagged(self, line: ClassifiedLine) -> bool:
        return is_suspicious(line, self.cfg.suspicion_threshold, self.cfg.confidence_floor)

    def _clip(self, text: str) -> str:
        text = text.replace("\n", " ").replace("|", "\\|")
        if len(text) > self.cfg.max_text_len:
            text = f"{text[: self.cfg.max_text_len - 3]}..."
        return text

    def _type_summary(self, lines: Sequence[ClassifiedLine]) -> list[str]:
        counts: Counter[str] = Counter()
        confs: dict[str, list[float]] = defaultdict(list)
        flagged: Counter[str] = Counter()
        for line in lines:
            key = line.assigned_type.value
            counts[key] += 1
            confs[key].append(line.confidence)
            if self._flagged(line):
                flagged[key] += 1

        out: list[str] = ["", "| Type | Count | Avg Conf | Suspicious |", "|:--|--:|--:|--:|"]
        for key, cnt in counts.most_common():
            out.append(f"| {key} | {cnt} | {mean(confs[key]):.2f} | {flagged[key]} |")
        return out

    def _lines_table(self, rows: Sequence[ClassifiedLine]) -> list[str]:
        out: list[str] = [
            "",
            "| # | Type | Conf | Susp | Method | Reasons | Text |",
            "|-:|:--|--:|--:|:--|:--|:--|",
        ]
        for line in rows:
            reasons = ", ".join(line.reasons) or "-"
            out.append(
                f"| {line.line_index} | {line.assigned_type.value} | {line.confidence:.2f} | "
                f"{line.total_suspicion} | {line.method.value} | {self._clip(reasons)} | {self._clip(line.text)} |"
            )
        return out

    def _reason_breakdown(self, lines: Sequence[ClassifiedLine]) -> list[str]:
        tags: Counter[str] = Counter()
        scores: dict[str, list[int]] = defaultdict(list)
        for line in lines:
            for finding in line.findings:
                tags[finding.tag] += 1
                scores[finding.tag].append(finding.score)

        if not tags:
            return ["", "_no findings_"]
        out: list[str] = ["", "| Reason | Count | Avg Score |", "|:--|--:|--:|"]
        for tag, cnt in tags.most_common():
            out.append(f"| {tag} | {cnt} | {mean(scores[tag]):.1f} |")
        return out

    def _outcome_section(self, outcome: MergeOutcome) -> list[str]:
        out: list[str] = [f"*status:* **{outcome.status.value}** • *model:* {outcome.model or '-'}"]
        out.append(f"*latency:* {outcome.latency_ms:.0f} ms")
        if outcome.message:
            out.append(f"*message:* {self._clip(outcome.message)}")
        if outcome.applied:
            out.extend(["", "| Item | Line | From | To | Conf | Reason |", "|-:|-:|:--|:--|--:|:--|"])
            for d in outcome.applied:
                out.append(
                    f"| {d.item_index} | {d.line_index} | {d.previous_type.value} | {d.final_type.value} | "
                    f"{d.confidence:.2f} | {self._clip(d.reason)} |"
                )
        if outcome.ignored_items:
            out.append(f"*ignored items:* {outcome.ignored_items}")
        return out


def make_review_markdown(lines: Sequence[ClassifiedLine], outcome: MergeOutcome | None = None) -> str:
    """Functional wrapper used by the CLI to emit a report."""

    return ReviewReporter().make_markdown(lines, outcome)
