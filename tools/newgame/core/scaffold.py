"""Terragrunt scaffolding documents for the bootstrap and deploy trees.

Three documents are rendered per game:

- ``self_bootstrap_nodes.json``: state backend, managed identity and the
  infrastructure-live repository as seen from inside the created repository.
- ``deploy_nodes.json``: the workload deployed once the repository exists.
- ``orchestrator_bootstrap_nodes.json``: the same bootstrap targets as seen
  by the local orchestrator, with the two documents above embedded as base64
  blobs so the repository module can commit them before any of it exists.

Documents are built as data and serialized once. The base64 blobs are taken
from the exact bytes written to disk.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tools.newgame.core.errors import ConfigurationError
from tools.newgame.core.naming import GameNames

MODULE_REPO = "je-sidestuff/terraform-azure-simple-modules"
SCAFFOLDER_SOURCE = (
    "github.com/je-sidestuff/terraform-github-orchestration"
    "//modules/terragrunt/scaffolder/from-json"
)

EMPTY_CONTENT_B64 = "e30="  # base64 of "{}"
STATE_KEY = "root.tfstate"

SELF_BOOTSTRAP_FILE = "self_bootstrap_nodes.json"
DEPLOY_FILE = "deploy_nodes.json"
ORCHESTRATOR_FILE = "orchestrator_bootstrap_nodes.json"


@dataclass(frozen=True)
class Placement:
    region: str = "eastus"
    env: str = "default"
    subscription: str = "sandbox"

    def to_dict(self) -> dict[str, str]:
        return {"region": self.region, "env": self.env, "subscription": self.subscription}


@dataclass(frozen=True)
class TargetDescriptor:
    """One Terragrunt unit: a module source plus its string inputs."""

    path: str
    ref: str
    vars: dict[str, str]
    placement: Placement = field(default_factory=Placement)
    repo: str = MODULE_REPO
    var_files: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "repo": self.repo,
            "path": self.path,
            "ref": self.ref,
            "placement": self.placement.to_dict(),
            "vars": dict(self.vars),
        }
        if self.var_files is not None:
            payload["var_files"] = list(self.var_files)
        return payload


@dataclass(frozen=True)
class ScaffoldDocument:
    input_targets: dict[str, TargetDescriptor]
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "input_targets": {
                name: target.to_dict() for name, target in self.input_targets.items()
            }
        }
        payload.update(self.extra)
        return payload

    def serialize(self) -> bytes:
        payload = self.to_dict()
        _reject_unresolved(payload, "")
        return (json.dumps(payload, indent=2) + "\n").encode("utf-8")

    def to_b64(self) -> str:
        return base64.b64encode(self.serialize()).decode("ascii")


@dataclass(frozen=True)
class ScaffoldInputs:
    names: GameNames
    github_org: str
    subscription_id: str
    module_ref: str
    scaffolding_root: str

    def __post_init__(self) -> None:
        for attr in ("github_org", "subscription_id", "module_ref", "scaffolding_root"):
            if not getattr(self, attr):
                raise ConfigurationError(f"missing scaffold input: {attr}")


@dataclass(frozen=True)
class RenderedScaffold:
    self_bootstrap: ScaffoldDocument
    deploy: ScaffoldDocument
    orchestrator: ScaffoldDocument

    def files(self) -> dict[str, bytes]:
        return {
            SELF_BOOTSTRAP_FILE: self.self_bootstrap.serialize(),
            DEPLOY_FILE: self.deploy.serialize(),
            ORCHESTRATOR_FILE: self.orchestrator.serialize(),
        }

    def write(self, directory: Path) -> list[Path]:
        directory.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for name, content in self.files().items():
            path = directory / name
            path.write_bytes(content)
            written.append(path)
        return written

    @property
    def orchestrator_b64(self) -> str:
        return self.orchestrator.to_b64()


def managed_identity_target(inputs: ScaffoldInputs) -> TargetDescriptor:
    names = inputs.names
    subject_base = f"repo:{inputs.github_org}/{names.repository}"
    return TargetDescriptor(
        path="modules/iam/managed-identity",
        ref=inputs.module_ref,
        vars={
            "ResourceGroupName": names.resource_group,
            "NamingPrefix": names.game_name,
            "FederatedIdentitySubjects": (
                f'"[{subject_base}:ref:refs/heads/main, {subject_base}:ref:refs/tags/init]"'
            ),
            "ContributorScope": f"/subscriptions/{inputs.subscription_id}",
        },
    )


def self_bootstrapped_state_target(
    inputs: ScaffoldInputs, *, include_root: bool
) -> TargetDescriptor:
    names = inputs.names
    return TargetDescriptor(
        path="modules/state/self-bootstrapped-state",
        ref=inputs.module_ref,
        vars={
            "ResourceGroupName": names.resource_group,
            "StorageAccountName": names.storage_account,
            "RootContainerName": names.state_container,
            "IncludeRoot": "true" if include_root else "false",
        },
    )


def infrastructure_live_repo_target(
    inputs: ScaffoldInputs,
    *,
    timeout_seconds: int,
    self_bootstrap_b64: str = EMPTY_CONTENT_B64,
    deploy_b64: str = EMPTY_CONTENT_B64,
) -> TargetDescriptor:
    return TargetDescriptor(
        path="modules/smart-template/infrastructure-live-deployment",
        ref=inputs.module_ref,
        vars={
            "Name": inputs.names.repository,
            "GithubOrg": inputs.github_org,
            "TimeoutInSeconds": str(timeout_seconds),
            "SelfBootstrapContentJsonB64": self_bootstrap_b64,
            "DeployContentJsonB64": deploy_b64,
        },
        var_files=(),
    )


def app_target(inputs: ScaffoldInputs) -> TargetDescriptor:
    return TargetDescriptor(
        path="examples/container-app/simple-webserver",
        ref=inputs.module_ref,
        vars={"NamingPrefix": inputs.names.app_naming_prefix},
    )


def build_self_bootstrap_document(inputs: ScaffoldInputs) -> ScaffoldDocument:
    return ScaffoldDocument(
        input_targets={
            "self_bootstrapped_state": self_bootstrapped_state_target(inputs, include_root=True),
            "managed_identity": managed_identity_target(inputs),
            "infrastructure_live_repo": infrastructure_live_repo_target(
                inputs, timeout_seconds=30
            ),
        }
    )


def build_deploy_document(inputs: ScaffoldInputs) -> ScaffoldDocument:
    return ScaffoldDocument(input_targets={"app": app_target(inputs)})


def build_orchestrator_document(
    inputs: ScaffoldInputs,
    self_bootstrap: ScaffoldDocument,
    deploy: ScaffoldDocument,
) -> ScaffoldDocument:
    names = inputs.names
    return ScaffoldDocument(
        input_targets={
            "self_bootstrapped_state": self_bootstrapped_state_target(inputs, include_root=False),
            "managed_identity": managed_identity_target(inputs),
            "infrastructure_live_repo": infrastructure_live_repo_target(
                inputs,
                timeout_seconds=300,
                self_bootstrap_b64=self_bootstrap.to_b64(),
                deploy_b64=deploy.to_b64(),
            ),
        },
        extra={
            "backend_generators": {
                "azure": {
                    "backend_type": "azure",
                    "backend_subtype": "user",
                    "arguments": {
                        "resource_group_name": names.resource_group,
                        "storage_account_name": names.storage_account,
                        "container_name": names.state_container,
                        "key": STATE_KEY,
                    },
                }
            },
            "provider_generators": {
                "azure": {
                    "provider_type": "azure",
                    "provider_subtype": "user",
                    "arguments": {"subscription_id": inputs.subscription_id},
                }
            },
            "subscription_id": inputs.subscription_id,
            "scaffolding_root": inputs.scaffolding_root,
        },
    )


def render_scaffold(inputs: ScaffoldInputs) -> RenderedScaffold:
    self_bootstrap = build_self_bootstrap_document(inputs)
    deploy = build_deploy_document(inputs)
    orchestrator = build_orchestrator_document(inputs, self_bootstrap, deploy)
    return RenderedScaffold(self_bootstrap=self_bootstrap, deploy=deploy, orchestrator=orchestrator)


def decode_embedded(blob: str) -> dict[str, Any]:
    return json.loads(base64.b64decode(blob))


def _reject_unresolved(value: Any, where: str) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _reject_unresolved(item, f"{where}.{key}" if where else str(key))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            _reject_unresolved(item, f"{where}[{index}]")
    elif isinstance(value, str):
        if value == "":
            raise ConfigurationError(f"empty value in scaffold document: {where}")
        if value.startswith("$") or "${" in value:
            raise ConfigurationError(f"unresolved placeholder in scaffold document: {where}")
