"""Result records produced by the detectors"""
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional


class OSType(str, Enum):
    """Normalized operating system family"""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    UNKNOWN = "unknown"


class ContainerType(str, Enum):
    """Container label, in precedence order"""
    DOCKER = "docker"
    WSL = "wsl"
    KUBERNETES = "kubernetes"


class CIProvider(str, Enum):
    """Known CI systems"""
    GITHUB_ACTIONS = "github-actions"
    GITLAB_CI = "gitlab-ci"
    TRAVIS_CI = "travis-ci"
    CIRCLECI = "circleci"
    JENKINS = "jenkins"
    AZURE_PIPELINES = "azure-pipelines"
    BITBUCKET_PIPELINES = "bitbucket-pipelines"
    TEAMCITY = "teamcity"
    APPVEYOR = "appveyor"
    CODEBUILD = "codebuild"
    UNKNOWN = "unknown"


class CloudProvider(str, Enum):
    """Known cloud and serverless platforms"""
    AWS_LAMBDA = "aws-lambda"
    GOOGLE_CLOUD_FUNCTIONS = "google-cloud-functions"
    AZURE_FUNCTIONS = "azure-functions"
    VERCEL = "vercel"
    NETLIFY = "netlify"
    CLOUDFLARE_WORKERS = "cloudflare-workers"


class EnvironmentMode(str, Enum):
    """Deployment mode read from the environment"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"
    STAGING = "staging"


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _Record:
    """Shared to_dict(): unset optional fields are omitted, not nulled"""

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[f.name] = _serialize(value)
        return data


@dataclass(frozen=True)
class OSInfo(_Record):
    """Operating system details"""
    platform: str
    type: OSType
    version: str
    release: str
    arch: str
    is_windows: bool = False
    is_macos: bool = False
    is_linux: bool = False


@dataclass(frozen=True)
class ContainerInfo(_Record):
    """Container and WSL signals; is_container is always derived"""
    is_docker: bool = False
    is_wsl: bool = False
    is_kubernetes: bool = False
    container_type: Optional[ContainerType] = None
    wsl_version: Optional[int] = None
    wsl_distro: Optional[str] = None

    @property
    def is_container(self) -> bool:
        return self.is_docker or self.is_wsl or self.is_kubernetes

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["is_container"] = self.is_container
        return data


@dataclass(frozen=True)
class CIInfo(_Record):
    """CI details; name, provider and is_pr stay None outside CI"""
    is_ci: bool = False
    name: Optional[str] = None
    provider: Optional[CIProvider] = None
    is_pr: Optional[bool] = None


@dataclass(frozen=True)
class CloudInfo(_Record):
    is_cloud: bool = False
    provider: Optional[CloudProvider] = None
    is_serverless: bool = False
    function_name: Optional[str] = None
    region: Optional[str] = None


@dataclass(frozen=True)
class PrivilegeInfo(_Record):
    """Privilege signals; is_elevated is always derived"""
    is_root: bool = False
    is_admin: bool = False
    uid: Optional[int] = None
    gid: Optional[int] = None
    username: Optional[str] = None

    @property
    def is_elevated(self) -> bool:
        return self.is_root or self.is_admin

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["is_elevated"] = self.is_elevated
        return data


@dataclass(frozen=True)
class RuntimeInfo(_Record):
    """Python interpreter details"""
    version: str
    major: int
    minor: int
    patch: int
    implementation: str
    arch: str
    platform: str


@dataclass(frozen=True)
class EnvironmentInfo(_Record):
    """Aggregate snapshot of every built-in detector"""
    os: OSInfo
    container: ContainerInfo
    ci: CIInfo
    cloud: CloudInfo
    runtime: RuntimeInfo
    privileges: PrivilegeInfo
    mode: EnvironmentMode
