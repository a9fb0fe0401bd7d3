"""
Pytest configuration for local imports and shared fixtures.
"""

# Standard Library
import datetime
import os
import sys

# PIP3 modules
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()

import herbarium_reports.assets
import herbarium_reports.config

FIXED_TIMESTAMP = datetime.datetime(2024, 5, 1, 9, 30)


#============================================
@pytest.fixture
def report_context() -> herbarium_reports.config.ReportContext:
	"""
	Report context with a fixed generation time.
	"""
	return herbarium_reports.config.build_context(
		"Test Report",
		user_name="Ana Souza",
		user_role="Curator",
		timestamp=FIXED_TIMESTAMP,
	)


#============================================
@pytest.fixture(autouse=True)
def reset_logo_asset(monkeypatch: pytest.MonkeyPatch) -> None:
	"""
	Give every test a fresh process wide logo asset.
	"""
	monkeypatch.setattr(herbarium_reports.assets, "_LOGO_ASSET", None)
