"""Unit tests for the exception hierarchy"""

from datetime import datetime

from langelot.exceptions import (
    CollaboratorError,
    ConfigurationError,
    DecompositionError,
    GenerationError,
    InitializationError,
    LangelotError,
    NotInitializedError,
    OrchestrationError,
    RetrievalError,
    SynthesisError,
    UploadError,
    WorkerExecutionError,
)


class TestLangelotError:
    """Test base LangelotError class"""

    def test_basic_initialization(self):
        """Test basic error initialization"""
        error = LangelotError("Test error")

        assert error.message == "Test error"
        assert error.details == {}
        assert error.recoverable is False
        assert error.user_message == "Test error"
        assert isinstance(error.timestamp, datetime)

    def test_str_representation(self):
        """Test string representation with details and recoverable flag"""
        error = LangelotError("Test error", details={"key": "value"}, recoverable=True)

        assert str(error) == "Test error (key=value) [recoverable]"

    def test_to_dict(self):
        """Test conversion to dictionary for logging"""
        error = LangelotError("Test error", details={"key": "value"}, user_message="Friendly")
        data = error.to_dict()

        assert data["error_type"] == "LangelotError"
        assert data["message"] == "Test error"
        assert data["details"] == {"key": "value"}
        assert data["user_message"] == "Friendly"
        assert "timestamp" in data


class TestOrchestrationErrors:
    """Test run-level errors"""

    def test_all_are_orchestration_errors(self):
        errors = [
            ConfigurationError("bad"),
            DecompositionError("none"),
            InitializationError("no uploads"),
            NotInitializedError("early"),
            WorkerExecutionError("boom", approach="A"),
            SynthesisError("merge failed"),
        ]
        for error in errors:
            assert isinstance(error, OrchestrationError)

    def test_configuration_error_fields(self):
        error = ConfigurationError("bad mode", field="worker_mode", value="document_analysis")

        assert error.field == "worker_mode"
        assert error.details == {"field": "worker_mode", "value": "document_analysis"}
        assert error.user_message == "Configuration error: bad mode"
        assert error.recoverable is False

    def test_phase_recorded_in_details(self):
        assert DecompositionError("none").details["phase"] == "decomposing"
        assert SynthesisError("x").phase == "synthesizing"

    def test_initialization_error_is_recoverable(self):
        error = InitializationError("no uploads", capability="document_analysis")

        assert error.recoverable is True
        assert error.capability == "document_analysis"
        assert error.details["phase"] == "dispatching"

    def test_worker_execution_error(self):
        error = WorkerExecutionError("boom", approach="Market scan", capability="retrieval")

        assert error.approach == "Market scan"
        assert error.details["approach"] == "Market scan"
        assert error.details["capability"] == "retrieval"
        assert "Market scan" in error.user_message


class TestCollaboratorErrors:
    """Test errors raised by the text generation connector"""

    def test_not_orchestration_errors(self):
        for error in [GenerationError("x"), RetrievalError("x"), UploadError("x", path="a.pdf")]:
            assert isinstance(error, CollaboratorError)
            assert not isinstance(error, OrchestrationError)

    def test_retrieval_error_is_generation_error(self):
        assert isinstance(RetrievalError("x"), GenerationError)

    def test_rate_limit_is_recoverable(self):
        error = GenerationError("slow down", status_code=429)

        assert error.recoverable is True
        assert "rate limit" in error.user_message

    def test_auth_failure(self):
        error = GenerationError("denied", status_code=401)

        assert error.recoverable is False
        assert "API key" in error.user_message

    def test_upload_error_path(self):
        error = UploadError("missing", path="report.pdf")

        assert error.path == "report.pdf"
        assert error.details["path"] == "report.pdf"
        assert error.recoverable is True
