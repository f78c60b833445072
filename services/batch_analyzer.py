"""Batch analysis: extract and analyze each input independently, then aggregate."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from config import AnalyzerSettings, UploadSettings
from logging_utils import Phase, PhaseLogger, create_phase_logger
from services.text_extraction import ExtractionError, extract_text, file_kind
from tools.repetition_analyzer import (
    AnalysisResult,
    RepetitionAnalysisError,
    analyze_text_within_limit,
)

INLINE_SOURCE = "Inline text"
INLINE_KIND = "text"


@dataclass
class BatchInput:
    """One named input of a batch: inline text or an uploaded file's bytes."""

    source: str
    kind: str
    text: Optional[str] = None
    data: Optional[bytes] = None

    @classmethod
    def inline(cls, text: str) -> "BatchInput":
        return cls(source=INLINE_SOURCE, kind=INLINE_KIND, text=text)

    @classmethod
    def upload(cls, filename: str, data: bytes) -> "BatchInput":
        return cls(source=filename, kind=file_kind(filename), data=data)


@dataclass
class BatchItemResult:
    source: str
    kind: str
    text: Optional[str] = None
    analysis: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @property
    def total_repeated(self) -> int:
        return self.analysis.total_repeated if self.analysis is not None else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "kind": self.kind,
            "analysis": self.analysis.to_dict() if self.analysis is not None else None,
            "error": self.error,
        }


@dataclass
class BatchReport:
    batch_id: str
    items: List[BatchItemResult] = field(default_factory=list)

    @property
    def total_repetitions(self) -> int:
        return sum(item.total_repeated for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRepetitions": self.total_repetitions,
            "results": [item.to_dict() for item in self.items],
        }


def _extract_item(item: BatchInput, upload_settings: UploadSettings, phase_logger: PhaseLogger) -> BatchItemResult:
    result = BatchItemResult(source=item.source, kind=item.kind, text=item.text)
    if item.text is not None:
        return result
    try:
        document = extract_text(item.source, item.data or b"", upload_settings)
        result.text = document.text
        phase_logger.debug(f"{item.source}: extracted {len(document.text)} characters")
    except ExtractionError as exc:
        phase_logger.warning(f"{item.source}: {exc}")
        result.error = str(exc)
    except Exception as exc:
        phase_logger.error(f"Unexpected extraction failure for {item.source}: {exc}", exc_info=True)
        result.error = str(exc) or exc.__class__.__name__
    return result


def _analyze_item(result: BatchItemResult, analyzer_settings: AnalyzerSettings, phase_logger: PhaseLogger) -> BatchItemResult:
    if result.error is not None or result.text is None:
        return result
    try:
        result.analysis = analyze_text_within_limit(result.text, analyzer_settings.max_input_chars)
    except RepetitionAnalysisError as exc:
        phase_logger.warning(f"{result.source}: {exc}")
        result.error = str(exc)
    except Exception as exc:
        phase_logger.error(f"Unexpected analysis failure for {result.source}: {exc}", exc_info=True)
        result.error = str(exc) or exc.__class__.__name__
    finally:
        # Extracted text is not part of the response; drop it once analyzed.
        result.text = None
    return result


async def analyze_batch(
    inputs: Sequence[BatchInput],
    analyzer_settings: Optional[AnalyzerSettings] = None,
    upload_settings: Optional[UploadSettings] = None,
    verbose: bool = False,
) -> BatchReport:
    """
    Analyze every input concurrently, keeping input order in the report.

    A failure while extracting or analyzing one input is recorded on that input's
    result (``error``) and never aborts the remaining inputs.
    """
    analyzer_settings = analyzer_settings or AnalyzerSettings()
    upload_settings = upload_settings or UploadSettings()
    report = BatchReport(batch_id=uuid.uuid4().hex[:8])
    phase_logger = create_phase_logger(report.batch_id, verbose=verbose)

    with phase_logger.phase(Phase.EXTRACTION, sub_label=f"{len(inputs)} input(s)"):
        extracted = await asyncio.gather(
            *(asyncio.to_thread(_extract_item, item, upload_settings, phase_logger) for item in inputs)
        )

    with phase_logger.phase(Phase.ANALYSIS):
        analyzed = await asyncio.gather(
            *(asyncio.to_thread(_analyze_item, item, analyzer_settings, phase_logger) for item in extracted)
        )

    with phase_logger.phase(Phase.AGGREGATION):
        report.items.extend(analyzed)
        for item in report.items:
            phase_logger.log_item_result(item.source, item.total_repeated, item.error)
        phase_logger.info(
            f"{len(report.items)} input(s), {report.total_repetitions} total repetition(s)"
        )

    phase_logger.log_timing_summary()
    return report
