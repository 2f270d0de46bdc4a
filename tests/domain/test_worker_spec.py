"""Tests for WorkerSpec validation."""

from pathlib import Path

import pytest

from crew.domain.exceptions import ValidationError
from crew.domain.worker import SpawnOptions, WorkerSpec, WorkerState


class TestWorkerSpecValidation:
    def test_minimal_spec_uses_defaults(self):
        spec = WorkerSpec.parse(path="job.py")

        assert spec.path == "job.py"
        assert spec.args == ()
        assert spec.data is None
        assert spec.options == SpawnOptions()

    def test_pathlike_path_is_coerced(self, tmp_path: Path):
        spec = WorkerSpec.parse(path=tmp_path / "job.py")

        assert spec.path == str(tmp_path / "job.py")

    def test_args_list_becomes_tuple(self):
        spec = WorkerSpec.parse(path="job.py", args=["--n", "3"])

        assert spec.args == ("--n", "3")

    @pytest.mark.parametrize("path", ["", 42, None, b"job.py"])
    def test_invalid_path_rejected(self, path):
        with pytest.raises(ValidationError):
            WorkerSpec.parse(path=path)

    @pytest.mark.parametrize("args", ["--n 3", [1, 2], {"a": "b"}, 7])
    def test_invalid_args_rejected(self, args):
        with pytest.raises(ValidationError):
            WorkerSpec.parse(path="job.py", args=args)

    def test_non_callable_handler_rejected(self):
        with pytest.raises(ValidationError):
            WorkerSpec.parse(path="job.py", on_message="not callable")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            WorkerSpec.parse(path="job.py", priority=1)

    def test_options_from_mapping(self, tmp_path: Path):
        spec = WorkerSpec.parse(
            path="job.py",
            options={"cwd": tmp_path, "env": {"A": "1"}, "discard_stderr": True},
        )

        assert spec.options.cwd == str(tmp_path)
        assert spec.options.env == {"A": "1"}
        assert spec.options.discard_stderr is True

    def test_validation_error_chains_pydantic_error(self):
        with pytest.raises(ValidationError) as exc_info:
            WorkerSpec.parse(path="")

        assert exc_info.value.__cause__ is not None


class TestWorkerState:
    @pytest.mark.parametrize(
        "state, terminal",
        [
            (WorkerState.CREATED, False),
            (WorkerState.RUNNING, False),
            (WorkerState.SUCCEEDED, True),
            (WorkerState.FAILED, True),
            (WorkerState.KILLED, True),
        ],
    )
    def test_is_terminal(self, state, terminal):
        assert state.is_terminal is terminal
