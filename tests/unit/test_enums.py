"""Unit tests for capability and mode enums"""

import pytest

from langelot.models.enums import Capability, OrchestrationState, WorkerMode


class TestCapabilityParse:
    """Test mapping of model-emitted capability literals"""

    @pytest.mark.parametrize(
        "literal, expected",
        [
            ("reasoning", Capability.REASONING),
            ("RETRIEVAL", Capability.RETRIEVAL),
            (" document_analysis ", Capability.DOCUMENT_ANALYSIS),
            ("document-analysis", Capability.DOCUMENT_ANALYSIS),
            ("Document Analysis", Capability.DOCUMENT_ANALYSIS),
            ("DocumentAnalysis", Capability.DOCUMENT_ANALYSIS),
            ("Reasoning", Capability.REASONING),
            ("search", Capability.RETRIEVAL),
            ("librarian", Capability.DOCUMENT_ANALYSIS),
            ("simple", Capability.REASONING),
        ],
    )
    def test_known_literals(self, literal, expected):
        assert Capability.parse(literal) is expected

    def test_unknown_literal(self):
        assert Capability.parse("oracle") is None

    def test_str_is_value(self):
        assert str(Capability.RETRIEVAL) == "retrieval"


class TestWorkerMode:
    """Test run-wide worker selection"""

    def test_auto_has_no_fixed_capability(self):
        assert WorkerMode.AUTO.fixed_capability is None

    @pytest.mark.parametrize("capability", list(Capability))
    def test_fixed_modes_match_capabilities(self, capability):
        assert WorkerMode(capability.value).fixed_capability is capability

    def test_states(self):
        assert [s.value for s in OrchestrationState] == [
            "decomposing",
            "dispatching",
            "synthesizing",
            "done",
            "failed",
        ]
