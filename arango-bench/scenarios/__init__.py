"""
Scenario registry, keyed by testcase name.
"""

from typing import Dict, List, Type

from common.errors import ConfigurationError
from scenarios.base import Scenario
from scenarios.documents import PostDocs, SeedDocs, ReadDocs, ReadSameDocs, ReplaceDocs
from scenarios.aql import ReadThreeDiamondAQL
from scenarios.version import Version, VersionRaw

SCENARIOS: Dict[str, Type[Scenario]] = {
    scenario.name: scenario
    for scenario in (
        PostDocs,
        SeedDocs,
        ReadDocs,
        ReadSameDocs,
        ReplaceDocs,
        ReadThreeDiamondAQL,
        Version,
        VersionRaw,
    )
}

# Testcases that chain several scenarios; any other testcase runs the scenario of that name
COMPOSITE_TESTCASES: Dict[str, List[str]] = {
    "all": [
        PostDocs.name,
        SeedDocs.name,
        ReadDocs.name,
        ReadSameDocs.name,
        ReplaceDocs.name,
        ReadThreeDiamondAQL.name,
    ],
    "version": [Version.name, VersionRaw.name],
}


def testcase_names() -> List[str]:
    return sorted(set(SCENARIOS) | set(COMPOSITE_TESTCASES))


def resolve_testcase(testcase: str) -> List[Type[Scenario]]:
    """Scenario classes to run, in order, for a testcase name.

    Raises:
        ConfigurationError: If the testcase is unknown
    """
    if testcase in COMPOSITE_TESTCASES:
        return [SCENARIOS[name] for name in COMPOSITE_TESTCASES[testcase]]
    if testcase in SCENARIOS:
        return [SCENARIOS[testcase]]
    raise ConfigurationError(
        f"Unknown testcase: {testcase}. Must be one of {', '.join(testcase_names())}."
    )


__all__ = ['Scenario', 'SCENARIOS', 'COMPOSITE_TESTCASES', 'resolve_testcase', 'testcase_names']
