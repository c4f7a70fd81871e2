from .report_gate import ReportGate

__all__ = ["ReportGate"]
