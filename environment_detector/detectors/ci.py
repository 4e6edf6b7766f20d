"""CI/CD system detection"""
from typing import Callable, Dict, List, Tuple

from ..core.constants import CI_ENV_VARS, CI_PROVIDER_ENV_VARS, GENERIC_PR_ENV_VARS
from ..core.detector import BaseDetector
from ..models import CIInfo, CIProvider
from ..utils.process import get_env, get_env_boolean, has_env

# Checked in order, first match wins
_PROVIDER_SIGNALS: List[Tuple[CIProvider, Callable[[], bool]]] = [
    (CIProvider.GITHUB_ACTIONS, lambda: get_env_boolean(CI_PROVIDER_ENV_VARS["GITHUB_ACTIONS"])),
    (CIProvider.GITLAB_CI, lambda: get_env_boolean(CI_PROVIDER_ENV_VARS["GITLAB_CI"])),
    (CIProvider.TRAVIS_CI, lambda: get_env_boolean(CI_PROVIDER_ENV_VARS["TRAVIS"])),
    (CIProvider.CIRCLECI, lambda: get_env_boolean(CI_PROVIDER_ENV_VARS["CIRCLECI"])),
    (CIProvider.JENKINS, lambda: has_env(CI_PROVIDER_ENV_VARS["JENKINS_URL"])),
    (CIProvider.AZURE_PIPELINES, lambda: get_env_boolean(CI_PROVIDER_ENV_VARS["TF_BUILD"])),
    (CIProvider.BITBUCKET_PIPELINES, lambda: has_env(CI_PROVIDER_ENV_VARS["BITBUCKET_BUILD_NUMBER"])),
    (CIProvider.TEAMCITY, lambda: has_env(CI_PROVIDER_ENV_VARS["TEAMCITY_VERSION"])),
    (CIProvider.APPVEYOR, lambda: get_env_boolean(CI_PROVIDER_ENV_VARS["APPVEYOR"])),
    (CIProvider.CODEBUILD, lambda: has_env(CI_PROVIDER_ENV_VARS["CODEBUILD_BUILD_ID"])),
]

CI_PROVIDER_NAMES: Dict[CIProvider, str] = {
    CIProvider.GITHUB_ACTIONS: "GitHub Actions",
    CIProvider.GITLAB_CI: "GitLab CI",
    CIProvider.TRAVIS_CI: "Travis CI",
    CIProvider.CIRCLECI: "CircleCI",
    CIProvider.JENKINS: "Jenkins",
    CIProvider.AZURE_PIPELINES: "Azure Pipelines",
    CIProvider.BITBUCKET_PIPELINES: "Bitbucket Pipelines",
    CIProvider.TEAMCITY: "TeamCity",
    CIProvider.APPVEYOR: "AppVeyor",
    CIProvider.CODEBUILD: "AWS CodeBuild",
}


def _any_env(*keys: str) -> bool:
    return any(has_env(key) for key in keys)


def _travis_pr() -> bool:
    value = get_env("TRAVIS_PULL_REQUEST")
    return value is not None and value != "false"


def _codebuild_pr() -> bool:
    head_ref = get_env("CODEBUILD_WEBHOOK_HEAD_REF")
    return bool(head_ref) and head_ref.startswith("refs/pull/")


_PR_RULES: Dict[CIProvider, Callable[[], bool]] = {
    CIProvider.GITHUB_ACTIONS: lambda: get_env("GITHUB_EVENT_NAME") == "pull_request",
    CIProvider.GITLAB_CI: lambda: _any_env("CI_MERGE_REQUEST_ID", "CI_EXTERNAL_PULL_REQUEST_IID"),
    CIProvider.TRAVIS_CI: _travis_pr,
    CIProvider.CIRCLECI: lambda: _any_env("CIRCLE_PULL_REQUEST", "CIRCLE_PR_NUMBER"),
    CIProvider.JENKINS: lambda: _any_env("CHANGE_ID", "ghprbPullId"),
    CIProvider.AZURE_PIPELINES: lambda: has_env("SYSTEM_PULLREQUEST_PULLREQUESTID"),
    CIProvider.BITBUCKET_PIPELINES: lambda: has_env("BITBUCKET_PR_ID"),
    CIProvider.TEAMCITY: lambda: has_env("TEAMCITY_PULL_REQUEST_NUMBER"),
    CIProvider.APPVEYOR: lambda: has_env("APPVEYOR_PULL_REQUEST_NUMBER"),
    CIProvider.CODEBUILD: _codebuild_pr,
}


class CIDetector(BaseDetector[CIInfo]):
    """Detect CI systems, the provider, and pull-request builds"""

    name = "ci"

    def _perform_detection(self) -> CIInfo:
        if not self._detect_ci():
            return CIInfo(is_ci=False)

        provider = self._detect_provider()
        return CIInfo(
            is_ci=True,
            name=self._get_name(provider),
            provider=provider,
            is_pr=self._detect_pull_request(provider),
        )

    def _detect_ci(self) -> bool:
        if (get_env_boolean(CI_ENV_VARS["CI"])
                or get_env_boolean(CI_ENV_VARS["CONTINUOUS_INTEGRATION"])
                or has_env(CI_ENV_VARS["BUILD_NUMBER"])
                or has_env(CI_ENV_VARS["CI_NAME"])):
            return True

        return any(has_env(var) for var in CI_PROVIDER_ENV_VARS.values())

    def _detect_provider(self) -> CIProvider:
        for provider, signal in _PROVIDER_SIGNALS:
            if signal():
                return provider
        return CIProvider.UNKNOWN

    def _get_name(self, provider: CIProvider) -> str:
        if provider in CI_PROVIDER_NAMES:
            return CI_PROVIDER_NAMES[provider]
        return get_env(CI_ENV_VARS["CI_NAME"]) or "Unknown CI"

    def _detect_pull_request(self, provider: CIProvider) -> bool:
        rule = _PR_RULES.get(provider)
        if rule is not None:
            return rule()
        return _any_env(*GENERIC_PR_ENV_VARS)
