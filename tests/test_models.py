"""Tests for data models."""

import pytest
from pydantic import ValidationError

from keepalive.core.models import HTTPMethod, ProbeOutcome, RunSummary, Target


class TestTarget:
    """Tests for target validation and derived properties."""
    
    def test_minimal_target(self):
        target = Target(name="orders", url="https://orders.example.com")
        
        assert target.endpoint is None
        assert target.apikey is None
        assert target.require_apikey is False
        assert target.effective_method == HTTPMethod.HEAD
    
    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Target(name="   ", url="https://orders.example.com")
    
    def test_url_scheme_required(self):
        with pytest.raises(ValidationError):
            Target(name="orders", url="orders.example.com")
    
    def test_apikey_selects_get(self):
        target = Target(name="a", url="https://a.example.com", apikey="secret")
        
        assert target.effective_method == HTTPMethod.GET
        assert target.is_authenticated is True
    
    def test_explicit_method_wins(self):
        target = Target(name="a", url="https://a.example.com", apikey="secret", method="head")
        
        assert target.effective_method == HTTPMethod.HEAD
    
    def test_blank_apikey_treated_as_missing(self):
        target = Target(name="a", url="https://a.example.com", apikey="", require_apikey=True)
        
        assert target.apikey is None
        assert target.is_authenticated is True
    
    def test_target_is_immutable(self):
        target = Target(name="a", url="https://a.example.com")
        
        with pytest.raises(ValidationError):
            target.name = "b"
    
    def test_apikey_hidden_from_repr(self):
        target = Target(name="a", url="https://a.example.com", apikey="super-secret-key")
        
        assert "super-secret-key" not in repr(target)
    
    def test_masked_apikey(self):
        long_key = Target(name="a", url="https://a.example.com", apikey="abcd1234567890wxyz")
        short_key = Target(name="b", url="https://b.example.com", apikey="short")
        no_key = Target(name="c", url="https://c.example.com")
        
        assert long_key.masked_apikey() == "abcd" + "*" * 10 + "wxyz"
        assert short_key.masked_apikey() == "*****"
        assert no_key.masked_apikey() == "-"


class TestRunSummary:
    """Tests for run aggregation."""
    
    def test_counts(self):
        summary = RunSummary(outcomes=(
            ProbeOutcome(target="a", success=True, http_status=200),
            ProbeOutcome(target="b", success=False, http_status=500, error="HTTP 500 Internal Server Error"),
            ProbeOutcome(target="c", success=False, error="Timeout"),
        ))
        
        assert summary.total == 3
        assert summary.successful == 1
        assert summary.failed == 2
        assert summary.successful + summary.failed == summary.total
        assert [o.target for o in summary.failures] == ["b", "c"]
        assert summary.exit_code == 1
    
    def test_all_successful_exit_zero(self):
        summary = RunSummary(outcomes=(
            ProbeOutcome(target="a", success=True, http_status=204),
        ))
        
        assert summary.exit_code == 0
        assert summary.failures == []
    
    def test_to_dict(self):
        summary = RunSummary(outcomes=(
            ProbeOutcome(target="a", success=False, error="Missing apikey"),
        ))
        
        report = summary.to_dict()
        
        assert report["summary"] == {"total": 1, "successful": 0, "failed": 1}
        assert report["outcomes"][0]["target"] == "a"
        assert report["outcomes"][0]["error"] == "Missing apikey"
