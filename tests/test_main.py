from __future__ import annotations

import httpx
import pytest

from workflow_dispatch.core.config import ActionSettings
from workflow_dispatch.core.logging import configure_logging
from workflow_dispatch.main import apply_overrides, main, parse_args, run

from conftest import CATALOG

DISPATCH_PATH = "/repos/octo/app/actions/workflows/2/dispatches"


def _settings(tmp_path, **overrides) -> ActionSettings:
    values = {
        "workflow": "deploy.yml",
        "token": "t",
        "github_ref": "main",
        "github_repository": "octo/app",
        "github_output": str(tmp_path / "output"),
    }
    values.update(overrides)
    return ActionSettings(**values)


def _outputs(tmp_path) -> str:
    path = tmp_path / "output"
    return path.read_text(encoding="utf-8") if path.exists() else ""


def test_run_writes_workflow_and_run_ids(github, tmp_path) -> None:
    github.serve_catalog("octo", "app", [CATALOG])
    github.route(
        "POST",
        DISPATCH_PATH,
        lambda request: httpx.Response(
            200,
            json={"status": "queued", "workflow_url": "https://api.example/runs-collection"},
        ),
    )
    github.route("GET", "/runs-collection", lambda request: httpx.Response(200, json={"id": 555}))

    exit_code = run(_settings(tmp_path), client=github.client())

    assert exit_code == 0
    assert _outputs(tmp_path).splitlines() == ["runId=555", "workflowId=2"]


def test_run_unconfirmed_dispatch_writes_only_workflow_id(github, tmp_path) -> None:
    github.serve_catalog("octo", "app", [CATALOG])
    github.route("POST", DISPATCH_PATH, lambda request: httpx.Response(204))

    assert run(_settings(tmp_path), client=github.client()) == 0
    assert _outputs(tmp_path).splitlines() == ["workflowId=2"]


def test_run_disabled_workflow_succeeds_without_outputs(github, tmp_path) -> None:
    github.serve_catalog("octo", "app", [CATALOG])
    github.route(
        "POST",
        DISPATCH_PATH,
        lambda request: httpx.Response(
            422,
            json={"message": "Cannot trigger a 'workflow_dispatch' on a disabled workflow"},
        ),
    )

    assert run(_settings(tmp_path), client=github.client()) == 0
    assert _outputs(tmp_path) == ""


def test_run_not_found_fails(github, tmp_path, caplog) -> None:
    github.serve_catalog("octo", "app", [CATALOG])

    assert run(_settings(tmp_path, workflow="nonexistent"), client=github.client()) == 1
    assert "Unable to find workflow 'nonexistent' in octo/app" in caplog.text
    assert _outputs(tmp_path) == ""


def test_run_auth_failure_fails(github, tmp_path, caplog) -> None:
    github.route(
        "GET",
        "/repos/octo/app/actions/workflows",
        lambda request: httpx.Response(401, json={"message": "Bad credentials"}),
    )

    assert run(_settings(tmp_path), client=github.client()) == 1
    assert "Bad credentials" in caplog.text


def test_run_bad_inputs_fails_before_any_request(github, tmp_path) -> None:
    client = github.client()

    assert run(_settings(tmp_path, inputs="{bad json"), client=client) == 1
    assert github.requests == []
    assert client.is_closed


def test_main_reads_environment_and_fails_on_bad_inputs(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.setenv("INPUT_WORKFLOW", "deploy.yml")
    monkeypatch.setenv("INPUT_TOKEN", "t")
    monkeypatch.setenv("INPUT_INPUTS", "{bad json")
    monkeypatch.setenv("GITHUB_REF", "main")
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/app")

    assert main([]) == 1
    assert "::error::Input 'inputs' is not valid JSON" in capsys.readouterr().out


def test_main_requires_workflow(capsys) -> None:
    assert main(["--token", "t", "--ref", "main", "--repo", "octo/app"]) == 1
    assert "::error::Input required and not supplied: workflow" in capsys.readouterr().out


def test_main_rejects_invalid_settings(monkeypatch, capsys) -> None:
    monkeypatch.setenv("WORKFLOW_DISPATCH_LOG_JSON", "not-a-bool")

    assert main([]) == 1
    assert "::error::Invalid configuration" in capsys.readouterr().out


def test_command_line_overrides_environment(monkeypatch) -> None:
    monkeypatch.setenv("INPUT_WORKFLOW", "build")
    monkeypatch.setenv("INPUT_REF", "main")
    settings = apply_overrides(ActionSettings(), parse_args(["--workflow", "deploy", "--verbose"]))

    assert settings.workflow == "deploy"
    assert settings.ref == "main"
    assert settings.debug is True


def _catalog_route(github, handler) -> None:
    github.route("GET", "/repos/octo/app/actions/workflows", handler)


def _queued_dispatch_with_run(github, run_body: dict) -> None:
    github.serve_catalog("octo", "app", [CATALOG])
    github.route(
        "POST",
        DISPATCH_PATH,
        lambda request: httpx.Response(
            200,
            json={"status": "queued", "workflow_url": "https://api.example/runs-collection"},
        ),
    )
    github.route("GET", "/runs-collection", lambda request: httpx.Response(200, json=run_body))


@pytest.mark.parametrize(
    ("arrange", "message"),
    [
        (
            lambda github: _queued_dispatch_with_run(github, {"id": "abc"}),
            "Workflow run response has an unexpected shape",
        ),
        (
            lambda github: _catalog_route(
                github,
                lambda request: httpx.Response(200, json={"workflows": [{"id": 1, "name": "build"}]}),
            ),
            "Workflow list for octo/app has an unexpected shape",
        ),
        (
            lambda github: _catalog_route(github, lambda request: httpx.Response(200, json=[CATALOG[0]])),
            "Expected an object from /repos/octo/app/actions/workflows",
        ),
    ],
    ids=["run-id-not-integer", "catalog-entry-missing-path", "catalog-body-is-list"],
)
def test_run_malformed_provider_body_fails_with_single_error(github, tmp_path, capsys, arrange, message) -> None:
    arrange(github)
    settings = _settings(tmp_path)
    configure_logging(settings)

    assert run(settings, client=github.client()) == 1

    errors = [line for line in capsys.readouterr().out.splitlines() if line.startswith("::error::")]
    assert len(errors) == 1
    assert message in errors[0]
    assert _outputs(tmp_path) == ""
