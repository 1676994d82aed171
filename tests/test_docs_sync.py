"""
Keep the quote scenario business summary in sync with the integration tests.

Fails when a scenario class or method is added without a matching entry in
docs/test_scenarios_business_summary.md, or when the document still lists a
scenario that was removed.
"""

import re
from pathlib import Path

import pytest

CLASS_PATTERN = re.compile(r'\*\*Test Class\*\*:\s*`(Test\w+)`')
METHOD_PATTERN = re.compile(r'\*\*Test Method\*\*:\s*`(test_\w+)`')


def project_root() -> Path:
    return Path(__file__).parent.parent


def scenario_tests(test_file: Path) -> dict[str, list[str]]:
    """Map each scenario class to its test methods."""
    scenarios: dict[str, list[str]] = {}
    current = None

    for line in test_file.read_text().splitlines():
        class_match = re.match(r'^class (Test\w+)', line)
        if class_match:
            current = class_match.group(1)
            scenarios[current] = []
        elif current:
            method_match = re.match(r'^\s+def (test_\w+)', line)
            if method_match:
                scenarios[current].append(method_match.group(1))

    return scenarios


def documented_scenarios(doc_file: Path) -> tuple[set[str], set[str]]:
    content = doc_file.read_text()
    return set(CLASS_PATTERN.findall(content)), set(METHOD_PATTERN.findall(content))


class TestDocumentationSync:
    """The business summary lists exactly the scenarios that exist."""

    @pytest.fixture
    def test_file(self) -> Path:
        return project_root() / 'tests' / 'test_integration_scenarios.py'

    @pytest.fixture
    def doc_file(self) -> Path:
        return project_root() / 'docs' / 'test_scenarios_business_summary.md'

    @pytest.fixture
    def scenarios(self, test_file):
        return scenario_tests(test_file)

    @pytest.fixture
    def documented(self, doc_file):
        return documented_scenarios(doc_file)

    def test_doc_files_exist(self, test_file: Path, doc_file: Path):
        assert test_file.exists(), f"Test file not found: {test_file}"
        assert doc_file.exists(), f"Documentation file not found: {doc_file}"

    def test_classes_match(self, scenarios, documented):
        doc_classes, _ = documented

        missing = set(scenarios) - doc_classes
        stale = doc_classes - set(scenarios)
        assert not missing, f"Scenario classes missing from business summary: {missing}"
        assert not stale, f"Business summary lists removed classes: {stale}"

    def test_methods_match(self, scenarios, documented):
        _, doc_methods = documented
        methods = {name for names in scenarios.values() for name in names}

        missing = methods - doc_methods
        stale = doc_methods - methods
        assert not missing, f"Scenario methods missing from business summary: {missing}"
        assert not stale, f"Business summary lists removed methods: {stale}"

    def test_every_class_has_a_scenario(self, scenarios):
        empty = [name for name, methods in scenarios.items() if not methods]
        assert not empty, f"Scenario classes without tests: {empty}"
