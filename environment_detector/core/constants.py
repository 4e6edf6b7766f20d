"""Signal names, probed paths and defaults shared by the detectors"""

DEFAULT_CACHE_TIMEOUT = 60000  # milliseconds
DEFAULT_COMMAND_TIMEOUT = 5.0  # seconds

CACHE_KEY_PREFIX = "detector:"

# Generic CI markers
CI_ENV_VARS = {
    "CI": "CI",
    "CONTINUOUS_INTEGRATION": "CONTINUOUS_INTEGRATION",
    "BUILD_NUMBER": "BUILD_NUMBER",
    "CI_NAME": "CI_NAME",
}

CI_PROVIDER_ENV_VARS = {
    "GITHUB_ACTIONS": "GITHUB_ACTIONS",
    "GITLAB_CI": "GITLAB_CI",
    "TRAVIS": "TRAVIS",
    "CIRCLECI": "CIRCLECI",
    "JENKINS_URL": "JENKINS_URL",
    "BITBUCKET_BUILD_NUMBER": "BITBUCKET_BUILD_NUMBER",
    "TEAMCITY_VERSION": "TEAMCITY_VERSION",
    "APPVEYOR": "APPVEYOR",
    "CODEBUILD_BUILD_ID": "CODEBUILD_BUILD_ID",
    "TF_BUILD": "TF_BUILD",  # Azure Pipelines
}

GENERIC_PR_ENV_VARS = ["PR_NUMBER", "PULL_REQUEST_ID", "PULL_REQUEST"]

CLOUD_ENV_VARS = {
    "AWS_LAMBDA_FUNCTION_NAME": "AWS_LAMBDA_FUNCTION_NAME",
    "AWS_EXECUTION_ENV": "AWS_EXECUTION_ENV",
    "AWS_REGION": "AWS_REGION",
    "FUNCTION_NAME": "FUNCTION_NAME",  # Google Cloud Functions
    "K_SERVICE": "K_SERVICE",  # Google Cloud Run
    "WEBSITE_SITE_NAME": "WEBSITE_SITE_NAME",  # Azure Functions
    "VERCEL": "VERCEL",
    "VERCEL_ENV": "VERCEL_ENV",
    "NETLIFY": "NETLIFY",
    "CF_WORKER": "CF_WORKER",  # Cloudflare Workers
}

AWS_RUNTIME_ENV_VARS = [
    "AWS_EXECUTION_ENV",
    "AWS_LAMBDA_RUNTIME_API",
    "_HANDLER",
    "LAMBDA_TASK_ROOT",
    "LAMBDA_RUNTIME_DIR",
]

AWS_ECS_ENV_VARS = ["ECS_CONTAINER_METADATA_URI", "ECS_CONTAINER_METADATA_URI_V4"]

EC2_HYPERVISOR_UUID = "/sys/hypervisor/uuid"

CONTAINER_FILES = {
    "DOCKER_ENV": "/.dockerenv",
    "DOCKER_INIT": "/.dockerinit",
    "WSL_INTEROP": "/run/WSL",
    "KUBERNETES_SERVICE": "/var/run/secrets/kubernetes.io",
    "KUBERNETES_TOKEN": "/var/run/secrets/kubernetes.io/serviceaccount/token",
}

PROC_FILES = {
    "SELF_CGROUP": "/proc/self/cgroup",
    "INIT_CGROUP": "/proc/1/cgroup",
    "SELF_MOUNTINFO": "/proc/self/mountinfo",
    "VERSION": "/proc/version",
}

OS_RELEASE_FILE = "/etc/os-release"

DOCKER_CGROUP_MARKERS = ["docker", "containerd"]

WSL_INDICATORS = {
    "ENV_VAR": "WSL_DISTRO_NAME",
    "PROC_VERSION": "Microsoft",
    "PROC_SYS": "/proc/sys/fs/binfmt_misc/WSLInterop",
}

WSL_ENV_VARS = ["WSLENV", "WSL_INTEROP"]

KUBERNETES_ENV_VARS = ["KUBERNETES_SERVICE_HOST", "KUBERNETES_PORT"]

# Pod names are dash-separated lowercase segments, e.g. web-7d4b9c-x2kq8
KUBERNETES_HOSTNAME_PATTERN = r"^[a-z0-9]+-[a-z0-9]+-[a-z0-9]+(-[a-z0-9]+)*$"

ADMIN_GROUPS = ["admin", "sudo", "wheel", "root"]

WINDOWS_ADMIN_SID = "s-1-5-32-544"

MODE_ENV_VAR = "NODE_ENV"

MODE_VALUES = {
    "DEVELOPMENT": "development",
    "PRODUCTION": "production",
    "TEST": "test",
    "STAGING": "staging",
}
