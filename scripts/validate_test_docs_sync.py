#!/usr/bin/env python3
"""
Check that docs/test_scenarios_business_summary.md lists every quote scenario
in tests/test_integration_scenarios.py, and nothing else.

Exits non-zero when a scenario is undocumented. Documented scenarios that no
longer exist are reported as warnings.

Run: python scripts/validate_test_docs_sync.py
"""

import re
import sys
from pathlib import Path


def scenario_tests(test_file: Path) -> dict[str, list[str]]:
    """Map each scenario class to its test methods."""
    scenarios = {}
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

    # e.g. **Test Class**: `TestComboFloor`
    classes = set(re.findall(r'\*\*Test Class\*\*:\s*`(Test\w+)`', content))
    # e.g. **Test Method**: `test_mypp_anchors_final_year`
    methods = set(re.findall(r'\*\*Test Method\*\*:\s*`(test_\w+)`', content))

    return classes, methods


def main():
    project_root = Path(__file__).parent.parent
    test_file = project_root / 'tests' / 'test_integration_scenarios.py'
    doc_file = project_root / 'docs' / 'test_scenarios_business_summary.md'

    for path in (test_file, doc_file):
        if not path.exists():
            print(f"❌ File not found: {path}")
            sys.exit(1)

    scenarios = scenario_tests(test_file)
    doc_classes, doc_methods = documented_scenarios(doc_file)
    methods = {name for names in scenarios.values() for name in names}

    errors = [f"Missing class documentation: {c}" for c in set(scenarios) - doc_classes]
    errors += [f"Missing method documentation: {m}" for m in methods - doc_methods]
    warnings = [f"Documented class no longer exists: {c}" for c in doc_classes - set(scenarios)]
    warnings += [f"Documented method no longer exists: {m}" for m in doc_methods - methods]

    print("=" * 60)
    print("Quote Scenario Documentation Sync")
    print("=" * 60)
    print(f"\nScenario classes: {len(scenarios)} ({len(doc_classes)} documented)")
    print(f"Scenario methods: {len(methods)} ({len(doc_methods)} documented)")

    if errors:
        print(f"\n❌ ERRORS ({len(errors)}):")
        for error in sorted(errors):
            print(f"   - {error}")

    if warnings:
        print(f"\n⚠️  WARNINGS ({len(warnings)}):")
        for warning in sorted(warnings):
            print(f"   - {warning}")

    if not errors and not warnings:
        print("\n✅ All scenarios are documented and in sync!")

    print("\nCoverage by Class:")
    for name, names in sorted(scenarios.items()):
        print(f"\n  {'✅' if name in doc_classes else '❌'} {name}")
        for method in names:
            print(f"      {'✅' if method in doc_methods else '❌'} {method}")

    sys.exit(1 if errors else 0)


if __name__ == '__main__':
    main()
