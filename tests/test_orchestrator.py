"""Tests for the run orchestrator."""

import io
import json
from pathlib import Path

import httpx
import pytest
from rich.console import Console

from keepalive.core.config import Settings
from keepalive.core.models import Target
from keepalive.core.orchestrator import RunOrchestrator, run_targets


@pytest.fixture
def output() -> Console:
    """Console that records into a buffer instead of the terminal."""
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestRunOrchestrator:
    """Tests for aggregation over a run."""
    
    @pytest.mark.asyncio
    async def test_summary_counts(self, settings, make_transport, sample_targets):
        transport = make_transport({"billing.example.com": 500})
        orchestrator = RunOrchestrator(settings, transport=transport)
        
        summary = await orchestrator.run(sample_targets)
        
        assert summary.total == len(sample_targets)
        assert summary.successful == 2
        assert summary.failed == 1
        assert summary.successful + summary.failed == summary.total
        assert summary.failures[0].target == "billing"
    
    def test_write_report(self, settings, tmp_path: Path):
        from keepalive.core.models import ProbeOutcome, RunSummary
        
        summary = RunSummary(outcomes=(ProbeOutcome(target="a", success=True, http_status=200),))
        path = tmp_path / "reports" / "run.json"
        
        RunOrchestrator(settings).write_report(summary, path)
        
        data = json.loads(path.read_text())
        assert data["summary"]["total"] == 1
        assert data["outcomes"][0]["http_status"] == 200


class TestRunTargets:
    """Tests for the exit-code producing entry point."""
    
    def test_all_successful_exit_zero(self, settings, make_transport, sample_targets, output):
        code = run_targets(sample_targets, settings, transport=make_transport(), output=output)
        
        text = output.file.getvalue()
        assert code == 0
        assert "Total projects: 3" in text
        assert "Successful: 3" in text
        assert "Failed: 0" in text
        assert "Failed projects:" not in text
    
    def test_any_failure_exit_one(self, settings, make_transport, output):
        transport = make_transport({"b.example.com": httpx.ReadTimeout("slow")})
        targets = [
            Target(name="a", url="https://a.example.com"),
            Target(name="b", url="https://b.example.com"),
            Target(name="c", url="https://c.example.com", require_apikey=True),
        ]
        
        code = run_targets(targets, settings, transport=transport, output=output)
        
        text = output.file.getvalue()
        assert code == 1
        assert "Failed: 2" in text
        assert "Failed projects:" in text
        assert "  - b: Timeout" in text
        assert "  - c: Missing apikey" in text
    
    def test_report_written(self, settings, make_transport, sample_targets, output, tmp_path):
        settings.output.report_path = tmp_path / "report.json"
        
        run_targets(sample_targets, settings, transport=make_transport(), output=output)
        
        data = json.loads((tmp_path / "report.json").read_text())
        assert data["summary"] == {"total": 3, "successful": 3, "failed": 0}
    
    def test_report_write_failure_exit_one(self, settings, make_transport, sample_targets, output, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        settings.output.report_path = blocker / "report.json"
        
        code = run_targets(sample_targets, settings, transport=make_transport(), output=output)
        
        text = output.file.getvalue()
        assert code == 1
        assert "Successful: 3" in text
        assert "Could not write report" in text
    
    def test_unexpected_error_exit_one(self, settings, sample_targets, output, monkeypatch):
        async def explode(self, targets):
            raise RuntimeError("event loop exploded")
        
        monkeypatch.setattr(RunOrchestrator, "run", explode)
        
        code = run_targets(sample_targets, settings, output=output)
        
        assert code == 1
        assert "Fatal error: event loop exploded" in output.file.getvalue()
