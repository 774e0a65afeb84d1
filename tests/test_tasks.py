# =============================================================================
# tests/test_tasks.py - Background Task Tests
# =============================================================================
# This module contains tests for:
# - Mapping Celery states to GenerationTaskStatus
# - The generate_brand task (run eagerly, workflow and Redis patched)
# =============================================================================

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from celery.exceptions import SoftTimeLimitExceeded

from app.routers.tasks import build_task_status
from core.models.generation import GenerationOutcome, TaskState
from core.models.progress import Step, StepStatus
from workers import tasks


# =============================================================================
# Status Mapping
# =============================================================================

class TestBuildTaskStatus:
    """Test Celery state -> TaskState translation."""

    def test_pending(self):
        status = build_task_status("t1", "PENDING", None)

        assert status.status == TaskState.QUEUED

    def test_progress(self):
        status = build_task_status("t1", "PROGRESS", {
            "progress": 50.0,
            "message": "Assembling your Brand Rider...",
            "steps": [{"id": "style", "label": "Style", "status": "complete"}],
        })

        assert status.status == TaskState.PROCESSING
        assert status.progress == 50.0
        assert status.steps[0].status == StepStatus.COMPLETE

    def test_success(self):
        status = build_task_status("t1", "SUCCESS", {
            "success": True,
            "brand_id": "b1",
            "logo_url": None,
        })

        assert status.status == TaskState.DONE
        assert status.progress == 100.0
        assert status.result == {"brand_id": "b1", "logo_url": None}

    def test_finished_but_failed(self):
        status = build_task_status("t1", "SUCCESS", {
            "success": False,
            "error": "Rate limit exceeded. Please try again later.",
        })

        assert status.status == TaskState.FAILED
        assert status.error == "Rate limit exceeded. Please try again later."

    def test_finished_but_cancelled(self):
        status = build_task_status("t1", "SUCCESS", {"success": False, "cancelled": True})

        assert status.status == TaskState.CANCELLED

    def test_revoked(self):
        assert build_task_status("t1", "REVOKED", None).status == TaskState.CANCELLED

    def test_worker_exception(self):
        status = build_task_status("t1", "FAILURE", RuntimeError("worker died"))

        assert status.status == TaskState.FAILED
        assert status.error == "worker died"


# =============================================================================
# generate_brand Task
# =============================================================================

@pytest.fixture
def patched_worker():
    """Patch the workflow and every Redis touchpoint of the task."""
    workflow = MagicMock()
    workflow.run = AsyncMock()

    with patch.object(tasks, "BrandGenerationWorkflow", return_value=workflow) as workflow_cls, \
            patch.object(tasks, "watch_for_cancel", new=AsyncMock()), \
            patch.object(tasks, "clear_cancel") as clear_cancel, \
            patch.object(tasks, "publish_task_complete") as complete, \
            patch.object(tasks, "publish_task_failed") as failed:
        yield {
            "workflow": workflow,
            "workflow_cls": workflow_cls,
            "clear_cancel": clear_cancel,
            "complete": complete,
            "failed": failed,
        }


class TestGenerateBrandTask:
    """Test the Celery task wrapper around the workflow."""

    def test_success(self, patched_worker, generate_request, user_id):
        patched_worker["workflow"].run.return_value = GenerationOutcome(
            success=True,
            brand_id="0d9f8e7c-6b5a-4c3d-8e2f-1a0b9c8d7e6f",
            steps=[Step(id="style", label="Style", status=StepStatus.COMPLETE)],
        )

        result = tasks.generate_brand.apply(
            args=(generate_request.model_dump(mode="json"), user_id),
            task_id="task-1",
        ).get()

        assert result["success"] is True
        assert result["user_id"] == user_id
        assert result["brand_id"] == "0d9f8e7c-6b5a-4c3d-8e2f-1a0b9c8d7e6f"
        patched_worker["complete"].assert_called_once()
        patched_worker["failed"].assert_not_called()
        patched_worker["clear_cancel"].assert_called_once_with("task-1")

    def test_failure_is_published(self, patched_worker, generate_request, user_id):
        patched_worker["workflow"].run.return_value = GenerationOutcome(
            success=False,
            error="Rate limited",
            failed_step="visual",
        )

        result = tasks.generate_brand.apply(
            args=(generate_request.model_dump(mode="json"), user_id),
            task_id="task-2",
        ).get()

        assert result["success"] is False
        patched_worker["failed"].assert_called_once_with(user_id, "task-2", "Rate limited", "visual")

    def test_soft_time_limit(self, patched_worker, generate_request, user_id):
        patched_worker["workflow"].run.side_effect = SoftTimeLimitExceeded()

        result = tasks.generate_brand.apply(
            args=(generate_request.model_dump(mode="json"), user_id),
            task_id="task-3",
        ).get()

        assert result == {"success": False, "error": tasks.TIMEOUT_MESSAGE, "user_id": user_id}
        patched_worker["failed"].assert_called_once_with(user_id, "task-3", tasks.TIMEOUT_MESSAGE)
        patched_worker["clear_cancel"].assert_called_once_with("task-3")

    def test_time_limit_reaches_task_from_inside_a_step(self, patched_worker, generate_request, user_id):
        """The workflow is told to let the soft time limit escape its steps."""
        patched_worker["workflow"].run.return_value = GenerationOutcome(success=True)

        tasks.generate_brand.apply(
            args=(generate_request.model_dump(mode="json"), user_id),
            task_id="task-4",
        ).get()

        kwargs = patched_worker["workflow_cls"].call_args.kwargs
        assert SoftTimeLimitExceeded in kwargs["abort_on"]


class TestProgressListener:
    """Test that snapshots reach both polling and WebSocket clients."""

    def test_listener_stores_and_publishes(self, user_id):
        from core.models.progress import ProgressSnapshot

        snapshot = ProgressSnapshot(progress=40.0)

        with patch.object(tasks, "update_progress") as update, \
                patch.object(tasks, "publish_progress") as publish:
            tasks.make_progress_listener(user_id, "task-1")(snapshot)

        update.assert_called_once_with(user_id, snapshot)
        publish.assert_called_once_with(user_id, "task-1", snapshot)
